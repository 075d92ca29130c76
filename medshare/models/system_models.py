# /medshare/models/system_models.py
from medshare.extensions import db
from medshare.utils.clock import utcnow

class AuditLog(db.Model):
    """Audit trail of owner actions and public link access attempts"""
    __tablename__ = 'audit_logs'

    id = db.Column(db.Integer, primary_key=True)
    account_id = db.Column(db.Integer, db.ForeignKey('accounts.id'))
    timestamp = db.Column(db.DateTime, default=utcnow, nullable=False)
    action = db.Column(db.String(100), nullable=False)
    resource = db.Column(db.String(100))
    resource_id = db.Column(db.String(100))
    ip_address = db.Column(db.String(45))
    user_agent = db.Column(db.String(255))
    success = db.Column(db.Boolean, default=True)
    details = db.Column(db.Text)
