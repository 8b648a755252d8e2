from flask import Blueprint, current_app, request
from flask_babel import gettext as _
from sqlalchemy import func
from ..models import db, Expense
from ..schemas import ExpenseCreate, ExpenseUpdate
from .utils import success, parse_body, get_or_404, filter_date_range, round_money

expenses_blueprint = Blueprint('expenses', __name__)

# ----------------------------
# Expenses Management
# ----------------------------
@expenses_blueprint.route('/api/expenses', methods=['GET'])
def list_expenses():
    query = filter_date_range(Expense.query, Expense.date)

    expense_type = request.args.get('expenseType')
    if expense_type:
        query = query.filter_by(expense_type=expense_type)
    category = request.args.get('category')
    if category:
        query = query.filter_by(category=category)

    expenses = query.order_by(Expense.date.desc()).all()
    total = sum(e.amount for e in expenses)
    return success([e.to_dict() for e in expenses], count=len(expenses), total=round_money(total))

@expenses_blueprint.route('/api/expenses/<int:expense_id>', methods=['GET'])
def get_expense(expense_id):
    expense = get_or_404(Expense, expense_id, 'Expense')
    return success(expense.to_dict())

@expenses_blueprint.route('/api/expenses', methods=['POST'])
def add_expense():
    data = parse_body(ExpenseCreate)
    new_expense = Expense(**data.model_dump(exclude_none=True))
    db.session.add(new_expense)
    db.session.commit()

    current_app.logger.info("Recorded expense %s: %s %s", new_expense.id, new_expense.expense_type, new_expense.amount)
    return success(new_expense.to_dict(), 201)

@expenses_blueprint.route('/api/expenses/<int:expense_id>', methods=['PUT'])
def edit_expense(expense_id):
    expense = get_or_404(Expense, expense_id, 'Expense')
    data = parse_body(ExpenseUpdate)

    for field, value in data.changes().items():
        setattr(expense, field, value)
    db.session.commit()

    current_app.logger.info("Updated expense %s", expense.id)
    return success(expense.to_dict())

@expenses_blueprint.route('/api/expenses/<int:expense_id>', methods=['DELETE'])
def delete_expense(expense_id):
    expense = get_or_404(Expense, expense_id, 'Expense')
    db.session.delete(expense)
    db.session.commit()

    current_app.logger.info("Deleted expense %s", expense_id)
    return success(message=_('Expense deleted successfully'))

@expenses_blueprint.route('/api/expenses/stats/summary', methods=['GET'])
def expense_summary():
    by_type_query = db.session.query(
        Expense.expense_type,
        func.sum(Expense.amount).label('total'),
        func.count(Expense.id).label('count'),
        func.avg(Expense.amount).label('average_amount')
    )
    by_type_query = filter_date_range(by_type_query, Expense.date)
    by_type = by_type_query.group_by(Expense.expense_type).order_by(func.sum(Expense.amount).desc()).all()

    totals_query = filter_date_range(
        db.session.query(func.sum(Expense.amount), func.count(Expense.id)), Expense.date
    )
    total_amount, total_count = totals_query.one()

    return success({
        'by_type': [
            {
                'expense_type': row.expense_type,
                'total': round_money(row.total),
                'count': row.count,
                'average_amount': round_money(row.average_amount)
            }
            for row in by_type
        ],
        'summary': {
            'total_amount': round_money(total_amount or 0),
            'total_count': total_count or 0
        }
    })
