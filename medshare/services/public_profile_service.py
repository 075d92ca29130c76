# /medshare/services/public_profile_service.py
from medshare.extensions import db
from medshare.models.account_models import Account
from medshare.services.medical_service import MedicalRecordService
from medshare.services.public_access import PublicAccessGuard, PublicViewerContext
from medshare.utils.clock import utcnow
from medshare.utils.errors import ErrorKind
from medshare.utils.result import Err, Ok


class PublicProfileService:
    """Builds the merged emergency view shown behind a public link."""

    def __init__(self, medical_service: MedicalRecordService, public_access: PublicAccessGuard):
        self.medical_service = medical_service
        self.public_access = public_access

    def check_public_link(self, public_id):
        # Answers the same way for unknown, inactive and unconfigured links
        if self.public_access.resolve(public_id) is None:
            return Err(ErrorKind.NOT_FOUND)
        return Ok({'exists': True, 'requires_password': True})

    def build_public_profile(self, viewer: PublicViewerContext):
        account = db.session.get(Account, viewer.account_id)
        medical = self.medical_service.read_for_viewer(viewer)
        contacts = [contact.to_dict() for contact in account.emergency_contacts]

        return {
            'first_name': account.first_name,
            'last_name': account.last_name,
            'full_name': account.full_name,
            'sex': account.sex,
            'birth_date': account.birth_date.isoformat() if account.birth_date else None,
            'age': account.age(),
            'phone': account.phone,
            'medical_info': medical.medical_dict(),
            'emergency_contacts': contacts,
            'accessed_at': utcnow().isoformat() + 'Z',
        }
