# /medshare/utils/error_handlers.py
from flask import jsonify, current_app
from medshare.extensions import db
from medshare.utils.errors import CodecError, DecryptionError, ErrorKind, InputError

# Not-found and gone links share one response so a deactivated account's link
# cannot be told apart from one that never existed.
_PUBLIC_LINK_NOT_FOUND = (404, 'Public link not found or unavailable')

ERROR_RESPONSES = {
    ErrorKind.AUTH_MISSING: (401, 'Access token required'),
    ErrorKind.AUTH_INVALID: (401, 'Invalid access token'),
    ErrorKind.AUTH_EXPIRED: (401, 'Access token expired'),
    ErrorKind.ACCOUNT_NOT_FOUND: (401, 'Account not found or inactive'),
    ErrorKind.ACCOUNT_INACTIVE: (403, 'Account is inactive'),
    ErrorKind.UNAUTHORIZED: (401, 'Incorrect public access password'),
    ErrorKind.NOT_CONFIGURED: (403, 'Public link not configured'),
    ErrorKind.GONE: _PUBLIC_LINK_NOT_FOUND,
    ErrorKind.NOT_FOUND: _PUBLIC_LINK_NOT_FOUND,
    ErrorKind.INVALID_TOKEN: (400, 'Invalid or expired token'),
    ErrorKind.ALREADY_USED: (400, 'Token has already been used'),
    ErrorKind.EXPIRED: (400, 'Token expired'),
}


def error_response(err):
    """Turns an Err result into the JSON response for its kind."""
    status, message = ERROR_RESPONSES[err.kind]
    return jsonify({'error': message}), status


def register_error_handlers(app):
    @app.errorhandler(400)
    def bad_request(error):
        return jsonify({'error': error.description or 'Bad request'}), 400

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({'error': 'Resource not found'}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({'error': 'Method not allowed'}), 405

    @app.errorhandler(DecryptionError)
    @app.errorhandler(CodecError)
    def data_integrity_error(error):
        db.session.rollback()
        current_app.logger.error(f"Data integrity failure: {type(error).__name__}: {error}")
        return jsonify({'error': 'Internal error while processing protected data'}), 500

    @app.errorhandler(InputError)
    def input_error(error):
        current_app.logger.error(f"Invalid input for encryption: {error}")
        return jsonify({'error': 'Invalid input'}), 400

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        current_app.audit_logger.error(f"Internal server error: {str(error)}")
        return jsonify({'error': 'Internal server error'}), 500
