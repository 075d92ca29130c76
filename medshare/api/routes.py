# /medshare/api/routes.py

from . import api_bp
from medshare.utils.decorators import audit_log, owner_required
from .controllers import auth_controller, user_controller, medical_controller, contact_controller, public_controller


# --- Authentication Endpoints ---
@api_bp.route('/auth/register', methods=['POST'])
@audit_log("ACCOUNT_REGISTRATION", "accounts")
def register():
    return auth_controller.register_account()

@api_bp.route('/auth/login', methods=['POST'])
@audit_log("ACCOUNT_LOGIN", "authentication")
def login():
    return auth_controller.login_account()

@api_bp.route('/auth/logout', methods=['POST'])
@owner_required
@audit_log("ACCOUNT_LOGOUT", "authentication")
def logout():
    return auth_controller.logout_account()

@api_bp.route('/auth/forgot-password', methods=['POST'])
@audit_log("PASSWORD_RESET_REQUEST", "authentication")
def forgot_password():
    return auth_controller.forgot_password()

@api_bp.route('/auth/reset-password', methods=['POST'])
@audit_log("PASSWORD_RESET", "authentication")
def reset_password():
    return auth_controller.reset_password()

@api_bp.route('/auth/verify-reset-token/<token>', methods=['GET'])
def verify_reset_token(token):
    return auth_controller.verify_reset_token(token)


# --- Account Endpoints ---
@api_bp.route('/users/profile', methods=['GET'])
@owner_required
@audit_log("VIEW_OWN_PROFILE", "accounts")
def get_profile():
    return user_controller.get_profile()

@api_bp.route('/users/profile', methods=['PUT'])
@owner_required
@audit_log("UPDATE_OWN_PROFILE", "accounts")
def update_profile():
    return user_controller.update_profile()

@api_bp.route('/users/password', methods=['PUT'])
@owner_required
@audit_log("PASSWORD_CHANGE", "authentication")
def change_password():
    return user_controller.change_password()

@api_bp.route('/users/generate-public-link', methods=['POST'])
@owner_required
@audit_log("PUBLIC_LINK_GENERATE", "public_profile")
def generate_public_link():
    return user_controller.generate_public_link()

@api_bp.route('/users/public-link-info', methods=['GET'])
@owner_required
def get_public_link_info():
    return user_controller.get_public_link_info()

@api_bp.route('/users/public-link', methods=['DELETE'])
@owner_required
@audit_log("PUBLIC_LINK_DISABLE", "public_profile")
def disable_public_link():
    return user_controller.disable_public_link()

@api_bp.route('/users/account', methods=['DELETE'])
@owner_required
@audit_log("ACCOUNT_DELETE", "accounts")
def delete_account():
    return user_controller.delete_account()


# --- Medical Information Endpoints ---
@api_bp.route('/medical/info', methods=['GET'])
@owner_required
@audit_log("VIEW_MEDICAL_INFO", "medical_records")
def get_medical_info():
    return medical_controller.get_medical_info()

@api_bp.route('/medical/info', methods=['PUT'])
@owner_required
@audit_log("UPDATE_MEDICAL_INFO", "medical_records")
def update_medical_info():
    return medical_controller.update_medical_info()

@api_bp.route('/medical/info', methods=['DELETE'])
@owner_required
@audit_log("CLEAR_MEDICAL_INFO", "medical_records")
def clear_medical_info():
    return medical_controller.clear_medical_info()


# --- Emergency Contact Endpoints ---
@api_bp.route('/emergency-contacts', methods=['GET'])
@owner_required
def list_contacts():
    return contact_controller.list_contacts()

@api_bp.route('/emergency-contacts/<int:contact_id>', methods=['GET'])
@owner_required
def get_contact(contact_id):
    return contact_controller.get_contact(contact_id)

@api_bp.route('/emergency-contacts', methods=['POST'])
@owner_required
@audit_log("CREATE_EMERGENCY_CONTACT", "emergency_contacts")
def create_contact():
    return contact_controller.create_contact()

@api_bp.route('/emergency-contacts/<int:contact_id>', methods=['PUT'])
@owner_required
@audit_log("UPDATE_EMERGENCY_CONTACT", "emergency_contacts")
def update_contact(contact_id):
    return contact_controller.update_contact(contact_id)

@api_bp.route('/emergency-contacts/<int:contact_id>', methods=['DELETE'])
@owner_required
@audit_log("DELETE_EMERGENCY_CONTACT", "emergency_contacts")
def delete_contact(contact_id):
    return contact_controller.delete_contact(contact_id)


# --- Public Profile Endpoints (no owner session; audited by the access guard) ---
@api_bp.route('/public/check/<public_id>', methods=['GET'])
def check_public_link(public_id):
    return public_controller.check_public_link(public_id)

@api_bp.route('/public/profile/<public_id>', methods=['POST'])
def get_public_profile(public_id):
    return public_controller.get_public_profile(public_id)
