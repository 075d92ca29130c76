# /medshare/services/medical_service.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from medshare.extensions import db
from medshare.models.medical_models import MEDICAL_LIST_FIELDS, MedicalRecord
from medshare.services.public_access import PublicViewerContext
from medshare.utils.errors import CodecError, DecryptionError
from medshare.utils.structured_codec import StructuredCodec


@dataclass(frozen=True)
class MedicalRecordUpdate:
    """Full replacement of an owner's medical record.

    A list field set to None is stored as an empty encrypted pair.
    """
    blood_type: Optional[str] = None
    allergies: Optional[List[str]] = None
    medications: Optional[List[str]] = None
    conditions: Optional[List[str]] = None
    surgeries: Optional[List[str]] = None


@dataclass
class MedicalRecordView:
    account_id: int
    record_id: Optional[int] = None
    blood_type: Optional[str] = None
    allergies: list = field(default_factory=list)
    medications: list = field(default_factory=list)
    conditions: list = field(default_factory=list)
    surgeries: list = field(default_factory=list)
    updated_at: Optional[datetime] = None

    def medical_dict(self):
        """Blood type and the four decrypted lists."""
        data = {'blood_type': self.blood_type}
        for name in MEDICAL_LIST_FIELDS:
            data[name] = getattr(self, name)
        return data

    def to_dict(self):
        return {
            'id': self.record_id,
            'account_id': self.account_id,
            **self.medical_dict(),
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }


class MedicalRecordService:
    """Reads and writes the encrypted medical record of one account."""

    def __init__(self, codec: StructuredCodec):
        self.codec = codec

    def _find(self, account_id: int):
        return MedicalRecord.query.filter_by(account_id=account_id).first()

    def get_or_create(self, account_id: int) -> MedicalRecord:
        record = self._find(account_id)
        if record is None:
            db.session.add(MedicalRecord(account_id=account_id))
            try:
                db.session.commit()
            except IntegrityError:
                # A concurrent first read inserted the row
                db.session.rollback()
            record = self._find(account_id)
        return record

    def read(self, account_id: int) -> MedicalRecordView:
        return self._to_view(self.get_or_create(account_id))

    def read_for_viewer(self, viewer: PublicViewerContext) -> MedicalRecordView:
        """Read-only access for a public viewer. Never creates a row."""
        record = MedicalRecord.query.filter_by(account_id=viewer.account_id).first()
        if record is None:
            return MedicalRecordView(account_id=viewer.account_id)
        return self._to_view(record)

    def update(self, account_id: int, update: MedicalRecordUpdate) -> MedicalRecordView:
        # Encrypt before taking the row lock
        encrypted = {name: self.codec.encrypt(getattr(update, name)) for name in MEDICAL_LIST_FIELDS}

        try:
            record = (MedicalRecord.query
                      .filter_by(account_id=account_id)
                      .with_for_update()
                      .first())
            if record is None:
                record = MedicalRecord(account_id=account_id)
                db.session.add(record)

            record.blood_type = update.blood_type
            for name, pair in encrypted.items():
                record.set_field(name, pair)
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            raise

        current_app.logger.info(f"Medical record updated for account {account_id}")
        return self._to_view(record)

    def clear(self, account_id: int) -> None:
        try:
            record = (MedicalRecord.query
                      .filter_by(account_id=account_id)
                      .with_for_update()
                      .first())
            if record is None:
                record = MedicalRecord(account_id=account_id)
                db.session.add(record)
            record.clear()
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            raise

    def _to_view(self, record: MedicalRecord) -> MedicalRecordView:
        view = MedicalRecordView(
            account_id=record.account_id,
            record_id=record.id,
            blood_type=record.blood_type,
            updated_at=record.updated_at
        )
        for name in MEDICAL_LIST_FIELDS:
            pair = record.get_field(name)
            try:
                value = self.codec.decrypt(pair.ciphertext, pair.iv)
            except (DecryptionError, CodecError) as e:
                current_app.logger.error(
                    f"Failed to decrypt medical field '{name}' for account {record.account_id}: "
                    f"{type(e).__name__}: {e}"
                )
                raise
            setattr(view, name, value if value is not None else [])
        return view
