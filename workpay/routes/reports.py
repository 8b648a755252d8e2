import io
from datetime import datetime, date
import pandas as pd
from flask import Blueprint, current_app, request, send_file
from flask_babel import gettext as _
from ..errors import ValidationFailed
from ..models import Expense, PowerloomProduction, Product, Worker
from .export_logs import record_export
from .settings import get_total_revenue
from .utils import (success, get_or_404, parse_date_arg, build_salary_tables,
                    calculate_weekly_profit, round_money)

reports_blueprint = Blueprint('reports', __name__)

EXPORT_FORMATS = {
    'csv': 'text/csv',
    'xlsx': 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
}


def _report_range():
    start = parse_date_arg('from')
    end = parse_date_arg('to')
    # Inclusive by calendar day, so compare days rather than timestamps
    start_day = start.date() if start else None
    end_day = end.date() if end else None
    if start_day and end_day and start_day > end_day:
        raise ValidationFailed(_('from must not be after to'))
    return start_day, end_day


def worker_salary_report(worker, start=None, end=None):
    """
    Salary of one worker. Loom operators are paid per unit produced; mechanics
    and loaders receive their flat stored salary.
    """
    report = {
        'worker': worker.summary(),
        'from': start.isoformat() if start else None,
        'to': end.isoformat() if end else None
    }

    if not worker.is_loom_operator:
        flat = worker.fixed_salary or 0
        report.update({
            'mode': 'flat',
            'products': [],
            'dates': [],
            'total': round_money(flat),
            'total_rounded': int(round_money(flat, '1'))
        })
        return report

    entries = PowerloomProduction.query.filter_by(worker_id=worker.id).all()
    products = Product.query.all()
    tables = build_salary_tables(entries, products, worker.id,
                                 inactive_policy=current_app.config['INACTIVE_PRODUCT_RATE'],
                                 start=start, end=end)
    report['mode'] = 'production'
    report.update(tables)
    return report


def salary_cross_tab(report):
    """
    One row per date, one column per (product, machine) pair and a final
    Salary row, the layout of the printed salary sheet.
    """
    columns = []
    data = {}
    for table in report['products']:
        for position, index in enumerate(table['machines']):
            column = (table['product_name'], f'Machine {index}')
            columns.append(column)
            by_date = {row['date']: row['quantities'][position] for row in table['rows']}
            values = [by_date.get(day) or None for day in report['dates']]
            values.append(table['salary_row'][position])
            data[column] = values

    header = pd.MultiIndex.from_tuples(columns, names=['Product', 'Dates']) if columns else None
    frame = pd.DataFrame(data, index=report['dates'] + ['Salary'], columns=header)
    frame.index.name = 'Date'
    return frame

# ----------------------------
# Salary Reports
# ----------------------------
@reports_blueprint.route('/api/reports/salary/<int:worker_id>')
def worker_salary(worker_id):
    worker = get_or_404(Worker, worker_id, 'Worker')
    start, end = _report_range()
    return success(worker_salary_report(worker, start, end))

@reports_blueprint.route('/api/reports/salary/<int:worker_id>/export')
def export_worker_salary(worker_id):
    worker = get_or_404(Worker, worker_id, 'Worker')
    export_format = request.args.get('format', 'csv').lower()
    if export_format not in EXPORT_FORMATS:
        raise ValidationFailed(_('format must be one of: %(formats)s', formats=', '.join(EXPORT_FORMATS)))
    if not worker.is_loom_operator:
        raise ValidationFailed(_('Salary export is only available for loom operators'))

    start, end = _report_range()
    report = worker_salary_report(worker, start, end)
    frame = salary_cross_tab(report)

    mem = io.BytesIO()
    if export_format == 'csv':
        mem.write(frame.to_csv(na_rep='-').encode('utf-8'))
    else:
        with pd.ExcelWriter(mem, engine='openpyxl') as writer:
            frame.to_excel(writer, sheet_name='Salary', na_rep='-')
            summary = pd.DataFrame({'Worker': [worker.name], 'Total Salary': [report['total_rounded']]})
            summary.to_excel(writer, sheet_name='Summary', index=False)
    mem.seek(0)

    # Record the export with the span of data actually included
    today = datetime.combine(date.today(), datetime.min.time())
    dates = report['dates']
    from_date = datetime.fromisoformat(dates[0]) if dates else today
    to_date = datetime.fromisoformat(dates[-1]) if dates else today
    record_export(worker, from_date, to_date, report['total_rounded'])

    filename = f"loom-operator-{worker.name}-{date.today().isoformat()}.{export_format}"
    return send_file(
        mem,
        as_attachment=True,
        download_name=filename,
        mimetype=EXPORT_FORMATS[export_format]
    )

# ----------------------------
# Profit Reports
# ----------------------------
@reports_blueprint.route('/api/reports/weekly-profit')
def weekly_profit():
    total_revenue = get_total_revenue()
    expenses = Expense.query.order_by(Expense.date).all()
    total_expenses = sum(e.amount for e in expenses)
    net_profit = total_revenue - total_expenses

    return success({
        'total_revenue': total_revenue,
        'total_expenses': round_money(total_expenses),
        'net_profit': round_money(net_profit),
        'profit_margin': round_money(net_profit / total_revenue * 100) if total_revenue > 0 else 0,
        'weeks': calculate_weekly_profit(expenses, total_revenue)
    })
