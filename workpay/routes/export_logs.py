from flask import Blueprint, current_app, request
from ..models import db, ExportLog, Worker
from ..schemas import ExportLogCreate
from .utils import success, parse_body, get_or_404, parse_int_arg

export_logs_blueprint = Blueprint('export_logs', __name__)


def record_export(worker, from_date, to_date, salary):
    """Append an export log entry. Export logs are never edited or removed."""
    log = ExportLog(worker_id=worker.id, from_date=from_date, to_date=to_date, salary=salary)
    db.session.add(log)
    db.session.commit()
    current_app.logger.info("Logged salary export %s for worker %s: %s (%s - %s)",
                            log.id, worker.id, salary, from_date.date(), to_date.date())
    return log

# ----------------------------
# Salary Export Logs
# ----------------------------
@export_logs_blueprint.route('/api/export-logs', methods=['POST'])
def add_export_log():
    data = parse_body(ExportLogCreate)
    worker = get_or_404(Worker, data.worker_id, 'Worker')
    log = record_export(worker, data.from_date, data.to_date, data.salary)
    return success(log.to_dict(), 201)

@export_logs_blueprint.route('/api/export-logs', methods=['GET'])
def list_export_logs():
    query = ExportLog.query
    worker_id = parse_int_arg('workerId')
    if worker_id is None:
        worker_id = parse_int_arg('worker_id')
    if worker_id is not None:
        query = query.filter_by(worker_id=worker_id)

    logs = query.order_by(ExportLog.created_at, ExportLog.id).all()
    return success([l.to_dict() for l in logs], count=len(logs))
