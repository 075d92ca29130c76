# /medshare/models/medical_models.py
from medshare.extensions import db
from medshare.utils.clock import utcnow
from medshare.utils.encryption_util import EncryptedField

MEDICAL_LIST_FIELDS = ('allergies', 'medications', 'conditions', 'surgeries')
BLOOD_TYPES = ('A+', 'A-', 'B+', 'B-', 'AB+', 'AB-', 'O+', 'O-')


def _pair_constraint(field):
    return db.CheckConstraint(
        f'({field}_ciphertext IS NULL) = ({field}_iv IS NULL)',
        name=f'ck_medical_records_{field}_pair'
    )


class MedicalRecord(db.Model):
    """One medical record per account.

    Blood type is kept in clear for triage. The four list fields exist only as
    ciphertext/IV pairs.
    """
    __tablename__ = 'medical_records'
    __table_args__ = tuple(_pair_constraint(field) for field in MEDICAL_LIST_FIELDS)

    id = db.Column(db.Integer, primary_key=True)
    account_id = db.Column(db.Integer, db.ForeignKey('accounts.id'), nullable=False, unique=True)
    blood_type = db.Column(db.String(3))

    # --- Encrypted (hex ciphertext + hex IV) ---
    allergies_ciphertext = db.Column(db.Text)
    allergies_iv = db.Column(db.String(32))
    medications_ciphertext = db.Column(db.Text)
    medications_iv = db.Column(db.String(32))
    conditions_ciphertext = db.Column(db.Text)
    conditions_iv = db.Column(db.String(32))
    surgeries_ciphertext = db.Column(db.Text)
    surgeries_iv = db.Column(db.String(32))

    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    account = db.relationship('Account', back_populates='medical_record')

    def get_field(self, name: str) -> EncryptedField:
        return EncryptedField(
            ciphertext=getattr(self, f'{name}_ciphertext'),
            iv=getattr(self, f'{name}_iv')
        )

    def set_field(self, name: str, field: EncryptedField) -> None:
        # Both halves are always assigned together
        setattr(self, f'{name}_ciphertext', field.ciphertext)
        setattr(self, f'{name}_iv', field.iv)

    def clear(self) -> None:
        self.blood_type = None
        for name in MEDICAL_LIST_FIELDS:
            self.set_field(name, EncryptedField())
