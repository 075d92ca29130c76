# /medshare/models/account_models.py
import uuid
from datetime import date
from medshare.extensions import db
from medshare.utils.clock import utcnow


class Account(db.Model):
    """Account identity, login secret and the optional public link."""
    __tablename__ = 'accounts'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    sex = db.Column(db.String(10))
    birth_date = db.Column(db.Date)
    phone = db.Column(db.String(20))
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    # Public link: opaque identifier plus its own secret, set and cleared together
    public_link_id = db.Column(db.String(36), unique=True, index=True)
    public_password_hash = db.Column(db.String(255))

    password_changed_at = db.Column(db.DateTime, default=utcnow)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    # --- Relationships ---
    medical_record = db.relationship('MedicalRecord', back_populates='account', uselist=False, cascade="all, delete-orphan")
    emergency_contacts = db.relationship(
        'EmergencyContact',
        back_populates='account',
        lazy='dynamic',
        cascade="all, delete-orphan",
        order_by='EmergencyContact.id'
    )
    reset_tokens = db.relationship('PasswordResetToken', back_populates='account', lazy='dynamic', cascade="all, delete-orphan")

    @staticmethod
    def normalize_email(email: str) -> str:
        return email.strip().lower()

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def has_public_link(self) -> bool:
        return bool(self.public_link_id and self.public_password_hash)

    def enable_public_link(self, public_password_hash: str) -> str:
        """Sets the public secret, keeping the existing identifier if there is one."""
        if not self.public_link_id:
            self.public_link_id = str(uuid.uuid4())
        self.public_password_hash = public_password_hash
        return self.public_link_id

    def disable_public_link(self) -> None:
        self.public_link_id = None
        self.public_password_hash = None

    def age(self, today: date = None):
        if not self.birth_date:
            return None
        today = today or date.today()
        years = today.year - self.birth_date.year
        if (today.month, today.day) < (self.birth_date.month, self.birth_date.day):
            years -= 1
        return years

    def to_dict(self):
        """Serializes the account for owner-facing responses."""
        return {
            'id': self.id,
            'email': self.email,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'sex': self.sex,
            'birth_date': self.birth_date.isoformat() if self.birth_date else None,
            'phone': self.phone,
            'has_public_link': self.has_public_link,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }


class PasswordResetToken(db.Model):
    """Single-use password recovery token."""
    __tablename__ = 'password_reset_tokens'

    id = db.Column(db.Integer, primary_key=True)
    account_id = db.Column(db.Integer, db.ForeignKey('accounts.id'), nullable=False, index=True)
    token = db.Column(db.String(64), unique=True, nullable=False, index=True)
    expires_at = db.Column(db.DateTime, nullable=False)
    used = db.Column(db.Boolean, default=False, nullable=False)
    used_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=utcnow)

    account = db.relationship('Account', back_populates='reset_tokens')
