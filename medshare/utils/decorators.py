from functools import wraps
from flask import request, current_app, g, make_response
from medshare.services import get_services
from medshare.utils.audit_util import record_event
from medshare.utils.error_handlers import error_response

def owner_required(f):
    """Runs the owner authentication guard and exposes the session as g.owner."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        result = get_services().owner_auth.authenticate(request.headers.get('Authorization'))
        if not result.ok:
            current_app.logger.info(f"Owner authentication failed: {result.kind.value} {result.detail}".rstrip())
            return error_response(result)
        g.owner = result.value
        return f(*args, **kwargs)
    return decorated_function

def audit_log(action, resource):
    """Records the outcome of an owner or auth action in the audit trail."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            owner = g.get('owner')
            account_id = owner.account_id if owner else None

            try:
                response = make_response(f(*args, **kwargs))
            except Exception as e:
                record_event(action, resource, account_id=account_id, success=False,
                             details=f"An error occurred: {type(e).__name__}")
                raise

            success = response.status_code < 400
            if account_id is None and success and response.is_json:
                # Registration and login only learn the account id from the response
                body = response.get_json(silent=True) or {}
                account_id = (body.get('account') or {}).get('id')

            record_event(action, resource, account_id=account_id, success=success,
                         details=f"Status: {response.status_code}")
            return response

        return decorated_function
    return decorator
