# /medshare/utils/audit_util.py
from flask import current_app, has_request_context, request
from sqlalchemy.exc import SQLAlchemyError

from medshare.extensions import db
from medshare.models.system_models import AuditLog


def record_event(action, resource, account_id=None, resource_id=None, success=True, details=None):
    """Writes one audit row and mirrors it to the audit logger.

    A failure to persist the row is logged and never breaks the request.
    """
    ip_address = user_agent = None
    if has_request_context():
        ip_address = request.remote_addr
        user_agent = request.headers.get('User-Agent')

    log_entry = AuditLog(
        account_id=account_id,
        action=action,
        resource=resource,
        resource_id=resource_id,
        ip_address=ip_address,
        user_agent=user_agent,
        success=success,
        details=details
    )
    try:
        db.session.add(log_entry)
        db.session.commit()
    except SQLAlchemyError as db_error:
        db.session.rollback()
        current_app.audit_logger.error(f"Failed to log audit entry due to DB error: {db_error}")

    log = current_app.audit_logger.info if success else current_app.audit_logger.warning
    log(
        f"Action='{action}', Resource='{resource}', AccountID='{account_id}', "
        f"ResourceID='{resource_id}', Success='{success}', Details='{details}'"
    )
