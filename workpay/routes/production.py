from flask import Blueprint, current_app, request
from flask_babel import gettext as _
from sqlalchemy import func
from ..errors import ValidationFailed
from ..models import db, Production, Worker
from ..schemas import ProductionCreate, ProductionUpdate
from .utils import success, parse_body, get_or_404, filter_date_range, parse_int_arg, round_money

production_blueprint = Blueprint('production', __name__)


def _require_worker(worker_id):
    if db.session.get(Worker, worker_id) is None:
        raise ValidationFailed(_('Invalid worker id'))

# ----------------------------
# Production Records
# ----------------------------
@production_blueprint.route('/api/production', methods=['GET'])
def list_production():
    query = filter_date_range(Production.query, Production.date)

    worker_id = parse_int_arg('worker')
    if worker_id is not None:
        query = query.filter_by(worker_id=worker_id)
    machine_number = request.args.get('machineNumber')
    if machine_number:
        query = query.filter_by(machine_number=machine_number)
    shift = request.args.get('shift')
    if shift:
        query = query.filter_by(shift=shift)

    records = query.order_by(Production.date.desc()).all()
    return success(
        [r.to_dict() for r in records],
        count=len(records),
        total_quantity=sum(r.quantity_produced for r in records),
        total_wastage=sum(r.wastage for r in records)
    )

@production_blueprint.route('/api/production/<int:record_id>', methods=['GET'])
def get_production(record_id):
    record = get_or_404(Production, record_id, 'Production record')
    return success(record.to_dict())

@production_blueprint.route('/api/production', methods=['POST'])
def add_production():
    data = parse_body(ProductionCreate)
    _require_worker(data.worker_id)

    record = Production(**data.model_dump(exclude_none=True))
    db.session.add(record)
    db.session.commit()

    current_app.logger.info("Recorded production %s: worker %s machine %s qty %s",
                            record.id, record.worker_id, record.machine_number, record.quantity_produced)
    return success(record.to_dict(), 201)

@production_blueprint.route('/api/production/<int:record_id>', methods=['PUT'])
def edit_production(record_id):
    record = get_or_404(Production, record_id, 'Production record')
    data = parse_body(ProductionUpdate)
    changes = data.changes()
    if 'worker_id' in changes:
        _require_worker(changes['worker_id'])

    for field, value in changes.items():
        setattr(record, field, value)
    db.session.commit()

    current_app.logger.info("Updated production record %s", record.id)
    return success(record.to_dict())

@production_blueprint.route('/api/production/<int:record_id>', methods=['DELETE'])
def delete_production(record_id):
    record = get_or_404(Production, record_id, 'Production record')
    db.session.delete(record)
    db.session.commit()

    current_app.logger.info("Deleted production record %s", record_id)
    return success(message=_('Production record deleted successfully'))

@production_blueprint.route('/api/production/stats/summary', methods=['GET'])
def production_summary():
    # 1. By shift
    by_shift = filter_date_range(db.session.query(
        Production.shift,
        func.sum(Production.quantity_produced).label('total_quantity'),
        func.sum(Production.wastage).label('total_wastage'),
        func.count(Production.id).label('count'),
        func.avg(Production.quantity_produced).label('average_quantity')
    ), Production.date).group_by(Production.shift).order_by(func.sum(Production.quantity_produced).desc()).all()

    # 2. By worker, joined with the worker record
    by_worker = filter_date_range(db.session.query(
        Worker,
        func.sum(Production.quantity_produced).label('total_quantity'),
        func.sum(Production.wastage).label('total_wastage'),
        func.count(Production.id).label('count')
    ).join(Worker, Production.worker_id == Worker.id), Production.date) \
        .group_by(Worker.id).order_by(func.sum(Production.quantity_produced).desc()).all()

    # 3. Overall
    overall = filter_date_range(db.session.query(
        func.sum(Production.quantity_produced),
        func.sum(Production.wastage),
        func.count(Production.id),
        func.avg(Production.quantity_produced)
    ), Production.date).one()
    total_quantity, total_wastage, total_records, average_quantity = overall

    return success({
        'by_shift': [
            {
                'shift': row.shift,
                'total_quantity': row.total_quantity,
                'total_wastage': row.total_wastage,
                'count': row.count,
                'average_quantity': round_money(row.average_quantity)
            }
            for row in by_shift
        ],
        'by_worker': [
            {
                'worker': worker.summary(),
                'total_quantity': total,
                'total_wastage': wastage,
                'count': count
            }
            for worker, total, wastage, count in by_worker
        ],
        'overall': {
            'total_quantity': total_quantity or 0,
            'total_wastage': total_wastage or 0,
            'total_records': total_records or 0,
            'average_quantity': round_money(average_quantity or 0)
        }
    })
