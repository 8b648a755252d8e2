"""
Request models for the JSON API.

Every write endpoint parses its body through one of these models so that
field constraints live in one place. Create models require the mandatory
fields; update models accept any subset of the same fields and run the same
checks on whatever was supplied.
"""
import math
import re
from datetime import datetime, date, timezone
from typing import ClassVar, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, StrictFloat, StrictInt, field_validator, model_validator

from .models import (
    LOOM_MACHINE_COUNTS, WORKER_ROLES, EXPENSE_TYPES, EXPENSE_CATEGORIES, SHIFTS, QUALITY_GRADES
)

PHONE_PATTERN = re.compile(r'^\+?[\d\s\-()]{10,}$')

Number = Union[StrictInt, StrictFloat]


def parse_datetime(value):
    """Parse an ISO 8601 string (date-only allowed) into a naive UTC datetime."""
    if value is None or isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ValueError('Invalid date format')
    else:
        raise ValueError('Invalid date format')

    if parsed is not None and parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _text(value, label, max_length, required=False):
    if value is None:
        if required:
            raise ValueError(f'{label} is required')
        return None
    if not isinstance(value, str):
        raise ValueError(f'{label} must be text')
    value = value.strip()
    if required and not value:
        raise ValueError(f'{label} is required')
    if len(value) > max_length:
        raise ValueError(f'{label} cannot exceed {max_length} characters')
    return value


def _non_negative(value, message):
    if value is not None and (not math.isfinite(value) or value < 0):
        raise ValueError(message)
    return value


def _choice(value, choices, message):
    if value is not None and value not in choices:
        raise ValueError(message)
    return value


class RequestModel(BaseModel):
    model_config = ConfigDict(extra='ignore')

    # Columns that are NOT NULL; an update may omit them but not null them
    not_null_fields: ClassVar[Tuple[str, ...]] = ()

    @model_validator(mode='after')
    def _reject_explicit_nulls(self):
        for field in self.not_null_fields:
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field.replace('_', ' ').capitalize()} cannot be empty")
        return self

    def changes(self):
        return self.model_dump(exclude_unset=True)


# ----------------------------
# Workers
# ----------------------------
class WorkerFields(RequestModel):
    not_null_fields = ('name', 'phone', 'power_loom_number', 'role', 'is_active')

    @field_validator('name', mode='before', check_fields=False)
    @classmethod
    def _name(cls, value):
        return _text(value, 'Worker name', 100, required=True)

    @field_validator('phone', mode='before', check_fields=False)
    @classmethod
    def _phone(cls, value):
        value = _text(value, 'Phone number', 30, required=True)
        if not PHONE_PATTERN.match(value):
            raise ValueError('Please enter a valid phone number')
        return value

    @field_validator('power_loom_number', check_fields=False)
    @classmethod
    def _loom(cls, value):
        return _choice(value, LOOM_MACHINE_COUNTS, 'Power loom number must be 1, 2 or 3')

    @field_validator('role', mode='before', check_fields=False)
    @classmethod
    def _role(cls, value):
        if isinstance(value, str):
            value = value.strip()
        return _choice(value, WORKER_ROLES, 'Please select a valid role')

    @field_validator('notes', mode='before', check_fields=False)
    @classmethod
    def _notes(cls, value):
        return _text(value, 'Notes', 500)

    @field_validator('fixed_salary', check_fields=False)
    @classmethod
    def _fixed_salary(cls, value):
        return _non_negative(value, 'Salary cannot be negative')

    @field_validator('hire_date', mode='before', check_fields=False)
    @classmethod
    def _hire_date(cls, value):
        parsed = parse_datetime(value)
        return parsed.date() if parsed else None


class WorkerCreate(WorkerFields):
    name: str
    phone: str
    power_loom_number: StrictInt = 1
    role: str = 'Loom Operator'
    is_active: bool = True
    hire_date: Optional[date] = None
    notes: Optional[str] = None
    fixed_salary: Optional[Number] = None


class WorkerUpdate(WorkerFields):
    name: Optional[str] = None
    phone: Optional[str] = None
    power_loom_number: Optional[StrictInt] = None
    role: Optional[str] = None
    is_active: Optional[bool] = None
    hire_date: Optional[date] = None
    notes: Optional[str] = None
    fixed_salary: Optional[Number] = None


# ----------------------------
# Products
# ----------------------------
class ProductFields(RequestModel):
    not_null_fields = ('name', 'worker_salary', 'is_active')

    @field_validator('name', mode='before', check_fields=False)
    @classmethod
    def _name(cls, value):
        return _text(value, 'Product name', 100, required=True)

    @field_validator('worker_salary', 'owner_salary', check_fields=False)
    @classmethod
    def _salary(cls, value):
        return _non_negative(value, 'Salary cannot be negative')


class ProductCreate(ProductFields):
    name: str
    worker_salary: Number
    owner_salary: Optional[Number] = None
    is_active: bool = True


class ProductUpdate(ProductFields):
    name: Optional[str] = None
    worker_salary: Optional[Number] = None
    owner_salary: Optional[Number] = None
    is_active: Optional[bool] = None


# ----------------------------
# Expenses
# ----------------------------
class ExpenseFields(RequestModel):
    not_null_fields = ('expense_type', 'amount', 'date', 'category', 'is_approved')

    @field_validator('expense_type', mode='before', check_fields=False)
    @classmethod
    def _type(cls, value):
        if isinstance(value, str):
            value = value.strip()
        return _choice(value, EXPENSE_TYPES, 'Please select a valid expense type')

    @field_validator('amount', check_fields=False)
    @classmethod
    def _amount(cls, value):
        return _non_negative(value, 'Amount cannot be negative')

    @field_validator('date', mode='before', check_fields=False)
    @classmethod
    def _date(cls, value):
        return parse_datetime(value)

    @field_validator('description', mode='before', check_fields=False)
    @classmethod
    def _description(cls, value):
        return _text(value, 'Description', 500)

    @field_validator('category', check_fields=False)
    @classmethod
    def _category(cls, value):
        return _choice(value, EXPENSE_CATEGORIES, 'Please select a valid category')


class ExpenseCreate(ExpenseFields):
    expense_type: str
    amount: Number
    date: Optional[datetime] = None
    description: Optional[str] = None
    category: str = 'Variable'
    receipt: Optional[str] = None
    is_approved: bool = True


class ExpenseUpdate(ExpenseFields):
    expense_type: Optional[str] = None
    amount: Optional[Number] = None
    date: Optional[datetime] = None
    description: Optional[str] = None
    category: Optional[str] = None
    receipt: Optional[str] = None
    is_approved: Optional[bool] = None


# ----------------------------
# Generic production records
# ----------------------------
class ProductionFields(RequestModel):
    not_null_fields = ('date', 'worker_id', 'machine_number', 'quantity_produced', 'shift', 'quality_grade', 'wastage')

    @field_validator('date', mode='before', check_fields=False)
    @classmethod
    def _date(cls, value):
        return parse_datetime(value)

    @field_validator('machine_number', mode='before', check_fields=False)
    @classmethod
    def _machine_number(cls, value):
        if isinstance(value, int) and not isinstance(value, bool):
            value = str(value)
        return _text(value, 'Machine number', 50, required=True)

    @field_validator('quantity_produced', check_fields=False)
    @classmethod
    def _quantity(cls, value):
        return _non_negative(value, 'Quantity cannot be negative')

    @field_validator('wastage', check_fields=False)
    @classmethod
    def _wastage(cls, value):
        return _non_negative(value, 'Wastage cannot be negative')

    @field_validator('product_type', mode='before', check_fields=False)
    @classmethod
    def _product_type(cls, value):
        return _text(value, 'Product type', 100)

    @field_validator('notes', mode='before', check_fields=False)
    @classmethod
    def _notes(cls, value):
        return _text(value, 'Notes', 500)

    @field_validator('shift', check_fields=False)
    @classmethod
    def _shift(cls, value):
        return _choice(value, SHIFTS, 'Please select a valid shift')

    @field_validator('quality_grade', check_fields=False)
    @classmethod
    def _grade(cls, value):
        return _choice(value, QUALITY_GRADES, 'Please select a valid quality grade')


class ProductionCreate(ProductionFields):
    date: Optional[datetime] = None
    worker_id: StrictInt
    machine_number: str
    quantity_produced: Number
    product_type: Optional[str] = None
    shift: str = 'Morning'
    quality_grade: str = 'A'
    notes: Optional[str] = None
    wastage: Number = 0


class ProductionUpdate(ProductionFields):
    date: Optional[datetime] = None
    worker_id: Optional[StrictInt] = None
    machine_number: Optional[str] = None
    quantity_produced: Optional[Number] = None
    product_type: Optional[str] = None
    shift: Optional[str] = None
    quality_grade: Optional[str] = None
    notes: Optional[str] = None
    wastage: Optional[Number] = None


# ----------------------------
# Powerloom production
# ----------------------------
class MachineSlot(BaseModel):
    index: StrictInt
    product_id: StrictInt
    quantity: Number


class PowerloomProductionCreate(RequestModel):
    loom_number: StrictInt
    date: datetime
    worker_id: StrictInt
    machines: List[MachineSlot]

    @field_validator('loom_number')
    @classmethod
    def _loom(cls, value):
        return _choice(value, LOOM_MACHINE_COUNTS, 'Invalid loom number')

    @field_validator('date', mode='before')
    @classmethod
    def _date(cls, value):
        if value is None or value == '':
            raise ValueError('Date and worker are required')
        return parse_datetime(value)

    @field_validator('machines')
    @classmethod
    def _machines_present(cls, value):
        if not value:
            raise ValueError('At least one machine entry is required')
        return value

    @model_validator(mode='after')
    def _machine_bounds(self):
        max_index = LOOM_MACHINE_COUNTS[self.loom_number]
        for slot in self.machines:
            if slot.index < 1 or slot.index > max_index:
                raise ValueError(
                    f'Machine index must be between 1 and {max_index} for loom {self.loom_number}'
                )
            if not math.isfinite(slot.quantity) or slot.quantity < 0:
                raise ValueError('Quantity must be a non-negative number')
        return self


# ----------------------------
# Export logs & settings
# ----------------------------
class ExportLogCreate(RequestModel):
    worker_id: StrictInt
    from_date: datetime
    to_date: datetime
    salary: Number

    @field_validator('from_date', 'to_date', mode='before')
    @classmethod
    def _dates(cls, value):
        return parse_datetime(value)

    @field_validator('salary')
    @classmethod
    def _salary(cls, value):
        return _non_negative(value, 'Salary cannot be negative')

    @model_validator(mode='after')
    def _range(self):
        if self.from_date > self.to_date:
            raise ValueError('fromDate must not be after toDate')
        return self


class RevenueUpdate(RequestModel):
    value: Number

    @field_validator('value')
    @classmethod
    def _value(cls, value):
        return _non_negative(value, 'Value must be a non-negative number')
