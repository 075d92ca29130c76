from flask import jsonify, current_app
from sqlalchemy.exc import IntegrityError
from medshare.extensions import db
from medshare.models.account_models import Account
from medshare.models.medical_models import MedicalRecord
from medshare.services import get_services
from medshare.services.owner_auth import issue_access_token
from medshare.utils.email_util import send_in_background, send_password_reset_email, send_welcome_email
from medshare.utils.errors import ErrorKind
from medshare.utils.error_handlers import error_response
from medshare.utils.password_util import hash_secret, verify_secret, is_strong_password
from medshare.utils.validation_util import (
    is_valid_email, is_valid_name, json_body, parse_birth_date, validate_profile_fields
)

PASSWORD_RULES = 'Password must be 8-100 characters with a lowercase letter, an uppercase letter and a digit'

def _token_error(err):
    if err.kind == ErrorKind.ACCOUNT_INACTIVE:
        return jsonify({'error': 'Account is inactive'}), 400
    return error_response(err)

def register_account():
    """Creates an account with an empty medical record and logs it in."""
    data = json_body()

    required_fields = ['email', 'password', 'first_name', 'last_name']
    if any(not data.get(field) for field in required_fields):
        return jsonify({'error': 'Email, password, first name and last name are required'}), 400
    if data.get('consent') is not True:
        return jsonify({'error': 'You must accept the terms of use and privacy policy'}), 400
    if not is_valid_email(data['email']):
        return jsonify({'error': 'Invalid email format'}), 400
    if not is_strong_password(data['password']):
        return jsonify({'error': PASSWORD_RULES}), 400
    if not is_valid_name(data['first_name']) or not is_valid_name(data['last_name']):
        return jsonify({'error': 'Names must be 2-100 letters'}), 400
    profile_error = validate_profile_fields(data)
    if profile_error:
        return jsonify({'error': profile_error}), 400

    email = Account.normalize_email(data['email'])
    if Account.query.filter_by(email=email).first():
        return jsonify({'error': 'Email already registered'}), 409

    account = Account(
        email=email,
        password_hash=hash_secret(data['password']),
        first_name=data['first_name'].strip(),
        last_name=data['last_name'].strip(),
        sex=data.get('sex'),
        birth_date=parse_birth_date(data['birth_date']) if data.get('birth_date') else None,
        phone=data['phone'].strip() if data.get('phone') else None
    )
    account.medical_record = MedicalRecord()
    db.session.add(account)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return jsonify({'error': 'Email already registered'}), 409

    # Delivery failures are logged and never undo the registration
    send_in_background(send_welcome_email, account.email, account.first_name)

    return jsonify({
        'message': 'Account created successfully',
        'access_token': issue_access_token(account),
        'account': account.to_dict()
    }), 201

def login_account():
    data = json_body()
    email, password = data.get('email'), data.get('password')
    if not isinstance(email, str) or not isinstance(password, str) or not email.strip() or not password:
        return jsonify({'error': 'Email and password required'}), 400

    account = Account.query.filter_by(email=Account.normalize_email(email)).first()
    if not account or not verify_secret(password, account.password_hash):
        return jsonify({'error': 'Invalid credentials'}), 401
    if not account.is_active:
        return jsonify({'error': 'Account deactivated'}), 403

    return jsonify({
        'message': 'Login successful',
        'access_token': issue_access_token(account),
        'account': account.to_dict()
    }), 200

def logout_account():
    """Tokens are stateless; the client discards its copy."""
    return jsonify({'message': 'Logout successful. Please discard the token on the client side.'}), 200

def forgot_password():
    """Issues a reset token. The response never reveals whether the email exists."""
    data = json_body()
    email = data.get('email')
    if not isinstance(email, str) or not email.strip():
        return jsonify({'error': 'Email is required'}), 400

    success_response = jsonify({
        'message': 'If the email is registered, you will receive instructions to reset your password'
    }), 200

    account = Account.query.filter_by(email=Account.normalize_email(email)).first()
    if not account:
        current_app.logger.info("Password reset requested for unknown email")
        return success_response
    if not account.is_active:
        current_app.logger.info(f"Password reset requested for inactive account {account.id}")
        return success_response

    reset_token = get_services().reset_tokens.issue(account.id)
    # Sent off the request path so known and unknown emails answer alike
    send_in_background(send_password_reset_email, account.email, account.first_name, reset_token.token)

    return success_response

def reset_password():
    data = json_body()
    token = data.get('token')
    if not isinstance(token, str) or not token or not data.get('new_password'):
        return jsonify({'error': 'Token and new password are required'}), 400
    if not is_strong_password(data['new_password']):
        return jsonify({'error': PASSWORD_RULES}), 400

    result = get_services().reset_tokens.redeem(token, data['new_password'])
    if not result.ok:
        return _token_error(result)

    return jsonify({'message': 'Password reset successfully'}), 200

def verify_reset_token(token):
    result = get_services().reset_tokens.check(token)
    if not result.ok:
        return _token_error(result)
    return jsonify({'message': 'Token is valid'}), 200
