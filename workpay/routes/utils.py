from collections import defaultdict
from decimal import Decimal, ROUND_HALF_UP
from flask import jsonify, request
from flask_babel import gettext as _
from ..errors import RecordNotFound, ValidationFailed
from ..models import db
from ..schemas import parse_datetime

INACTIVE_RATE_POLICIES = ('zero', 'keep')


def success(data=None, status=200, **extra):
    body = {'success': True}
    if data is not None:
        body['data'] = data
    body.update(extra)
    return jsonify(body), status


def parse_body(model):
    """Validate the JSON request body against a request model."""
    payload = request.get_json(silent=True)
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationFailed(_('Request body must be a JSON object'))
    return model.model_validate(payload)


def get_or_404(model, record_id, entity):
    record = db.session.get(model, record_id)
    if record is None:
        raise RecordNotFound(entity)
    return record


def parse_date_arg(name, end_of_day=False):
    """Read an optional ISO date query argument; date-only end bounds cover the whole day."""
    raw = request.args.get(name)
    if not raw:
        return None
    try:
        value = parse_datetime(raw)
    except ValueError:
        raise ValidationFailed(_('Invalid date for %(name)s', name=name))
    if end_of_day and len(raw.strip()) == 10:
        value = value.replace(hour=23, minute=59, second=59, microsecond=999999)
    return value


def parse_int_arg(name):
    raw = request.args.get(name)
    if raw in (None, ''):
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValidationFailed(_('%(name)s must be an integer', name=name))


def filter_date_range(query, column, start_arg='startDate', end_arg='endDate'):
    start = parse_date_arg(start_arg)
    end = parse_date_arg(end_arg, end_of_day=True)
    if start:
        query = query.filter(column >= start)
    if end:
        query = query.filter(column <= end)
    return query


def round_money(value, places='0.01'):
    """Half-up rounding; places='1' gives whole currency units."""
    return float(Decimal(str(value)).quantize(Decimal(places), rounding=ROUND_HALF_UP))


# ----------------------------
# Salary aggregation
# ----------------------------
def product_rate(product, inactive_policy='zero'):
    """
    Worker salary per unit for a product.

    A product that no longer exists pays nothing. A deactivated product pays
    nothing under the 'zero' policy and its stored rate under 'keep'.
    """
    if product is None:
        return 0.0
    if not product.is_active and inactive_policy == 'zero':
        return 0.0
    return product.worker_salary or 0.0


def group_worker_production(entries, worker_id, start=None, end=None):
    """
    Groups powerloom entries of one worker into
    product_id -> calendar day -> machine index -> summed quantity.

    Slots with a zero quantity are skipped. start/end are inclusive dates.
    """
    grouped = defaultdict(lambda: defaultdict(lambda: defaultdict(float)))
    for entry in entries:
        if entry.worker_id != worker_id:
            continue
        day = entry.date.date()
        if (start and day < start) or (end and day > end):
            continue
        for slot in entry.machines:
            if slot.quantity is None or slot.quantity <= 0 or slot.product_id is None:
                continue
            grouped[slot.product_id][day][slot.index] += slot.quantity
    return grouped


def build_salary_tables(entries, products, worker_id, inactive_policy='zero', start=None, end=None):
    """
    Computes the per-product salary tables and total salary of a loom operator.

    Each table has one row per date and one column per machine index that
    produced something; the salary row is the column total times the
    product's worker rate. The total is kept to 2 decimals and also given
    rounded to whole currency units for display.
    """
    products_by_id = {p.id: p for p in products}
    grouped = group_worker_production(entries, worker_id, start, end)

    tables = []
    total = 0.0
    for product_id, by_date in grouped.items():
        product = products_by_id.get(product_id)
        rate = product_rate(product, inactive_policy)
        machines = sorted({index for by_machine in by_date.values() for index in by_machine})
        days = sorted(by_date)

        column_totals = [sum(by_date[day].get(index, 0) for day in days) for index in machines]
        salary_row = [round_money(qty * rate) for qty in column_totals]
        product_salary = sum(qty * rate for qty in column_totals)
        total += product_salary

        tables.append({
            'product_id': product_id,
            'product_name': product.name if product else 'Unknown',
            'rate': rate,
            'is_active': product.is_active if product else False,
            'machines': machines,
            'rows': [
                {'date': day.isoformat(), 'quantities': [by_date[day].get(index, 0) for index in machines]}
                for day in days
            ],
            'column_totals': column_totals,
            'salary_row': salary_row,
            'salary': round_money(product_salary)
        })

    tables.sort(key=lambda t: (t['product_name'].lower(), t['product_id']))
    dates = sorted({row['date'] for table in tables for row in table['rows']})
    total = round_money(total)
    return {
        'products': tables,
        'dates': dates,
        'total': total,
        'total_rounded': int(round_money(total, '1'))
    }


# ----------------------------
# Weekly profit
# ----------------------------
def iso_week_key(value):
    year, week, _weekday = value.isocalendar()[:3]
    return year, week


def calculate_weekly_profit(expenses, total_revenue):
    """
    Buckets expenses by ISO week and builds a cumulative profit trend.

    With W observed weeks, week N is credited total_revenue * N / W of the
    revenue and charged all expenses up to and including that week.
    """
    weekly = defaultdict(float)
    for expense in expenses:
        if expense.date is None or expense.amount is None:
            continue
        weekly[iso_week_key(expense.date)] += expense.amount

    keys = sorted(weekly)
    total_weeks = len(keys)
    points = []
    cumulative_expenses = 0.0
    for n, (year, week) in enumerate(keys, start=1):
        weekly_expenses = weekly[(year, week)]
        cumulative_expenses += weekly_expenses
        revenue_share = total_revenue * n / total_weeks
        points.append({
            'key': f'{year}-W{week}',
            'label': f'Week {n}',
            'weekly_expenses': round_money(weekly_expenses),
            'cumulative_expenses': round_money(cumulative_expenses),
            'revenue_share': round_money(revenue_share),
            'profit': round_money(revenue_share - cumulative_expenses)
        })
    return points
