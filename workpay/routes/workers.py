from flask import Blueprint, current_app, request
from flask_babel import gettext as _
from ..models import db, Worker
from ..schemas import WorkerCreate, WorkerUpdate
from .utils import success, parse_body, get_or_404, parse_int_arg

workers_blueprint = Blueprint('workers', __name__)

# ----------------------------
# Workers Management
# ----------------------------
@workers_blueprint.route('/api/workers', methods=['GET'])
def list_workers():
    query = Worker.query.filter_by(is_active=True)

    role = request.args.get('role')
    if role:
        query = query.filter_by(role=role)
    loom = parse_int_arg('loom')
    if loom is not None:
        query = query.filter_by(power_loom_number=loom)

    workers = query.order_by(Worker.name).all()
    return success([w.to_dict() for w in workers], count=len(workers))

@workers_blueprint.route('/api/workers/<int:worker_id>', methods=['GET'])
def get_worker(worker_id):
    worker = get_or_404(Worker, worker_id, 'Worker')
    return success(worker.to_dict())

@workers_blueprint.route('/api/workers', methods=['POST'])
def add_worker():
    data = parse_body(WorkerCreate)
    new_worker = Worker(**data.model_dump(exclude_none=True))
    db.session.add(new_worker)
    db.session.commit()

    current_app.logger.info("Created worker %s (%s)", new_worker.id, new_worker.name)
    return success(new_worker.to_dict(), 201)

@workers_blueprint.route('/api/workers/<int:worker_id>', methods=['PUT'])
def edit_worker(worker_id):
    worker = get_or_404(Worker, worker_id, 'Worker')
    data = parse_body(WorkerUpdate)

    for field, value in data.changes().items():
        setattr(worker, field, value)
    db.session.commit()

    current_app.logger.info("Updated worker %s (%s)", worker.id, worker.name)
    return success(worker.to_dict())

@workers_blueprint.route('/api/workers/<int:worker_id>', methods=['DELETE'])
def delete_worker(worker_id):
    # Soft delete: production history keeps pointing at the worker
    worker = get_or_404(Worker, worker_id, 'Worker')
    worker.is_active = False
    db.session.commit()

    current_app.logger.info("Deactivated worker %s (%s)", worker.id, worker.name)
    return success(message=_('Worker deleted successfully'))
