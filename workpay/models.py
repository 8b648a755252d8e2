from datetime import datetime, date
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

# Fixed machine-slot count of each loom
LOOM_MACHINE_COUNTS = {1: 8, 2: 9, 3: 5}

WORKER_ROLES = ['Loom Operator', 'Mechanic', 'Loader']
EXPENSE_TYPES = ['Raw Materials', 'Equipment', 'Utilities', 'Labor', 'Maintenance',
                 'Transport', 'Office Supplies', 'Salary', 'Other']
EXPENSE_CATEGORIES = ['Fixed', 'Variable', 'One-time']
SHIFTS = ['Morning', 'Afternoon', 'Night']
QUALITY_GRADES = ['A', 'B', 'C', 'Rejected']

REVENUE_SETTING_KEY = 'totalRevenue'


def _iso(value):
    return value.isoformat() if value else None


class TimestampMixin:
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class Worker(TimestampMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False, index=True)
    phone = db.Column(db.String(30), nullable=False)
    power_loom_number = db.Column(db.Integer, nullable=False, default=1)
    role = db.Column(db.String(20), nullable=False, default='Loom Operator')
    is_active = db.Column(db.Boolean, default=True, nullable=False)  # Soft delete flag
    hire_date = db.Column(db.Date, default=date.today)
    notes = db.Column(db.String(500), nullable=True)
    fixed_salary = db.Column(db.Float, nullable=True)  # Flat salary for Mechanic/Loader

    @property
    def is_loom_operator(self):
        return self.role == 'Loom Operator'

    def summary(self):
        return {'id': self.id, 'name': self.name, 'phone': self.phone, 'role': self.role}

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'phone': self.phone,
            'power_loom_number': self.power_loom_number,
            'role': self.role,
            'is_active': self.is_active,
            'hire_date': _iso(self.hire_date),
            'notes': self.notes,
            'fixed_salary': self.fixed_salary,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }


class Product(TimestampMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False, unique=True)
    worker_salary = db.Column(db.Float, nullable=False)  # Currency per unit paid to the operator
    owner_salary = db.Column(db.Float, nullable=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False, index=True)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'worker_salary': self.worker_salary,
            'owner_salary': self.owner_salary,
            'is_active': self.is_active,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }


class PowerloomProduction(TimestampMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True)
    loom_number = db.Column(db.Integer, nullable=False, index=True)
    date = db.Column(db.DateTime, nullable=False)
    worker_id = db.Column(db.Integer, db.ForeignKey('worker.id'), nullable=False, index=True)

    worker = db.relationship('Worker', backref='powerloom_entries')
    machines = db.relationship('MachineEntry', backref='production', lazy=True,
                               cascade='all, delete-orphan', order_by='MachineEntry.index')

    def to_dict(self):
        return {
            'id': self.id,
            'loom_number': self.loom_number,
            'date': _iso(self.date),
            'worker': {'id': self.worker.id, 'name': self.worker.name} if self.worker else None,
            'machines': [m.to_dict() for m in self.machines],
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }


class MachineEntry(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    production_id = db.Column(db.Integer, db.ForeignKey('powerloom_production.id'), nullable=False)
    index = db.Column(db.Integer, nullable=False)
    product_id = db.Column(db.Integer, db.ForeignKey('product.id'), nullable=False)
    quantity = db.Column(db.Float, nullable=False)

    product = db.relationship('Product')

    def to_dict(self):
        return {
            'index': self.index,
            'product': {'id': self.product.id, 'name': self.product.name} if self.product else None,
            'quantity': self.quantity
        }


class Production(TimestampMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True)
    date = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    worker_id = db.Column(db.Integer, db.ForeignKey('worker.id'), nullable=False, index=True)
    machine_number = db.Column(db.String(50), nullable=False)
    quantity_produced = db.Column(db.Float, nullable=False)
    product_type = db.Column(db.String(100), nullable=True)
    shift = db.Column(db.String(20), nullable=False, default='Morning')
    quality_grade = db.Column(db.String(10), nullable=False, default='A')
    notes = db.Column(db.String(500), nullable=True)
    wastage = db.Column(db.Float, nullable=False, default=0.0)

    worker = db.relationship('Worker', backref='production_records')

    def to_dict(self):
        return {
            'id': self.id,
            'date': _iso(self.date),
            'worker': self.worker.summary() if self.worker else None,
            'machine_number': self.machine_number,
            'quantity_produced': self.quantity_produced,
            'product_type': self.product_type,
            'shift': self.shift,
            'quality_grade': self.quality_grade,
            'notes': self.notes,
            'wastage': self.wastage,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }


class Expense(TimestampMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True)
    expense_type = db.Column(db.String(50), nullable=False, index=True)
    amount = db.Column(db.Float, nullable=False)
    date = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    description = db.Column(db.String(500), nullable=True)
    category = db.Column(db.String(20), nullable=False, default='Variable')
    receipt = db.Column(db.String(255), nullable=True)  # Path or URL once uploads exist
    is_approved = db.Column(db.Boolean, default=True, nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'expense_type': self.expense_type,
            'amount': self.amount,
            'date': _iso(self.date),
            'description': self.description,
            'category': self.category,
            'receipt': self.receipt,
            'is_approved': self.is_approved,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }


class Setting(TimestampMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(100), unique=True, nullable=False)
    value_number = db.Column(db.Float, nullable=False, default=0.0)


class ExportLog(db.Model):
    """Write-once record of an exported salary report."""
    id = db.Column(db.Integer, primary_key=True)
    worker_id = db.Column(db.Integer, db.ForeignKey('worker.id'), nullable=False, index=True)
    from_date = db.Column(db.DateTime, nullable=False)
    to_date = db.Column(db.DateTime, nullable=False)
    salary = db.Column(db.Float, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    worker = db.relationship('Worker')

    def to_dict(self):
        return {
            'id': self.id,
            'worker': {'id': self.worker.id, 'name': self.worker.name, 'role': self.worker.role} if self.worker else None,
            'from_date': _iso(self.from_date),
            'to_date': _iso(self.to_date),
            'salary': self.salary,
            'created_at': _iso(self.created_at)
        }
