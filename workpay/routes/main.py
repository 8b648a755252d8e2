from datetime import datetime
from flask import Blueprint, current_app, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from ..models import db

main_blueprint = Blueprint('main', __name__)


@main_blueprint.route('/')
def index():
    return jsonify({'message': 'WorkPay Backend Server is running!'})


@main_blueprint.route('/api/health')
def health():
    return jsonify({
        'status': 'OK',
        'timestamp': datetime.utcnow().isoformat(),
        'database': db.engine.url.get_backend_name()
    })


@main_blueprint.route('/api/db-status')
def db_status():
    """Round-trips a trivial query to report whether the database is reachable."""
    url = db.engine.url
    try:
        db.session.execute(text('SELECT 1'))
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error("Database status check failed: %s", e)
        return jsonify({'status': 'Disconnected', 'error': 'Database status check failed', 'message': str(e)}), 500

    return jsonify({
        'status': 'Connected',
        'backend': url.get_backend_name(),
        'host': url.host,
        'name': url.database
    })
