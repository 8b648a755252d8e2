from flask import Blueprint, current_app, request
from flask_babel import gettext as _
from ..errors import ValidationFailed
from ..models import db, PowerloomProduction, MachineEntry, Product, Worker, LOOM_MACHINE_COUNTS
from ..schemas import PowerloomProductionCreate
from .utils import success, parse_body, get_or_404, parse_int_arg

powerloom_blueprint = Blueprint('powerloom', __name__)


def _loom_filter(query):
    loom = parse_int_arg('loom')
    if loom in LOOM_MACHINE_COUNTS:
        query = query.filter(PowerloomProduction.loom_number == loom)
    return query

# ----------------------------
# Powerloom Production
# ----------------------------
@powerloom_blueprint.route('/api/powerloom-production', methods=['GET'])
def list_powerloom_production():
    query = _loom_filter(PowerloomProduction.query)
    entries = query.order_by(PowerloomProduction.date, PowerloomProduction.created_at, PowerloomProduction.id).all()
    return success([e.to_dict() for e in entries], count=len(entries))

@powerloom_blueprint.route('/api/powerloom-production', methods=['POST'])
def add_powerloom_production():
    current_app.logger.info("POST /api/powerloom-production payload: %s", request.get_json(silent=True))
    data = parse_body(PowerloomProductionCreate)

    if db.session.get(Worker, data.worker_id) is None:
        raise ValidationFailed(_('Invalid worker id'))

    product_ids = {slot.product_id for slot in data.machines}
    known = {p.id for p in Product.query.filter(Product.id.in_(product_ids)).all()}
    for slot in data.machines:
        if slot.product_id not in known:
            raise ValidationFailed(_('Invalid product id for machine %(index)s', index=slot.index))

    entry = PowerloomProduction(
        loom_number=data.loom_number,
        date=data.date,
        worker_id=data.worker_id,
        machines=[
            MachineEntry(index=slot.index, product_id=slot.product_id, quantity=slot.quantity)
            for slot in data.machines
        ]
    )
    db.session.add(entry)
    db.session.commit()

    current_app.logger.info("Recorded loom %s production %s for worker %s (%s machines)",
                            entry.loom_number, entry.id, entry.worker_id, len(entry.machines))
    return success(entry.to_dict(), 201)

@powerloom_blueprint.route('/api/powerloom-production/<int:entry_id>', methods=['DELETE'])
def delete_powerloom_production(entry_id):
    entry = get_or_404(PowerloomProduction, entry_id, 'Production entry')
    db.session.delete(entry)
    db.session.commit()

    current_app.logger.info("Deleted powerloom production %s", entry_id)
    return success(message=_('Production entry deleted successfully'))

@powerloom_blueprint.route('/api/powerloom-production', methods=['DELETE'])
def delete_all_powerloom_production():
    loom = parse_int_arg('loom')
    if loom is not None and loom not in LOOM_MACHINE_COUNTS:
        raise ValidationFailed(_('Invalid loom number'))

    # Delete through the ORM so machine entries cascade
    entries = _loom_filter(PowerloomProduction.query).all()
    for entry in entries:
        db.session.delete(entry)
    db.session.commit()

    current_app.logger.warning("Deleted %s powerloom production entries (loom=%s)",
                               len(entries), request.args.get('loom', 'all'))
    return success({'deleted_count': len(entries)})
