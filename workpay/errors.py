from flask import current_app, jsonify, request
from flask_babel import gettext as _
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.exceptions import HTTPException

from .models import db


class ApiError(Exception):
    """Base for errors that map onto a JSON error envelope."""
    status_code = 500
    error = 'Server Error'

    def __init__(self, message=None, error=None):
        super().__init__(message or error or self.error)
        self.message = message
        if error:
            self.error = error

    def to_dict(self):
        body = {'success': False, 'error': self.error}
        if self.message:
            body['message'] = self.message
        return body


class ValidationFailed(ApiError):
    status_code = 400
    error = 'Validation Error'


class DuplicateRecord(ApiError):
    status_code = 400
    error = 'Duplicate'


class RecordNotFound(ApiError):
    status_code = 404

    def __init__(self, entity):
        super().__init__(error=_('%(entity)s not found', entity=entity))


def format_validation_errors(exc):
    """Flatten pydantic errors into one comma-joined message."""
    messages = []
    for err in exc.errors():
        field = '.'.join(str(part) for part in err['loc']) or 'body'
        if err['type'] == 'missing':
            messages.append(_('%(field)s is required', field=field))
        elif err['type'] == 'value_error' and 'error' in err.get('ctx', {}):
            messages.append(_(str(err['ctx']['error'])))
        else:
            messages.append(_('%(field)s: %(msg)s', field=field, msg=err['msg']))
    return ', '.join(messages)


def register_error_handlers(app):

    @app.errorhandler(ApiError)
    def handle_api_error(e):
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(ValidationError)
    def handle_validation_error(e):
        return jsonify(ValidationFailed(format_validation_errors(e)).to_dict()), 400

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(e):
        db.session.rollback()
        current_app.logger.warning("Integrity error on %s %s: %s", request.method, request.path, e.orig)
        if 'unique' in str(e.orig).lower():
            err = DuplicateRecord(_('Product name must be unique') if 'product' in str(e.orig).lower()
                                  else _('Record must be unique'))
        else:
            err = ValidationFailed(_('Referenced record does not exist'))
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        if e.code == 404:
            body = {'success': False, 'error': 'Not Found',
                    'message': _('Route %(path)s not found', path=request.path)}
        elif e.code == 400:
            body = {'success': False, 'error': 'Validation Error',
                    'message': _('Request body must be valid JSON')}
        else:
            body = {'success': False, 'error': e.name, 'message': e.description}
        return jsonify(body), e.code

    @app.errorhandler(SQLAlchemyError)
    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        db.session.rollback()
        current_app.logger.exception("Unhandled error on %s %s", request.method, request.path)
        if current_app.config.get('APP_ENV') == 'production':
            message = _('Something went wrong')
        else:
            message = str(e)
        return jsonify({'success': False, 'error': 'Server Error', 'message': message}), 500
