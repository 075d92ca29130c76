from flask import jsonify, g, current_app
from sqlalchemy.exc import SQLAlchemyError
from medshare.extensions import db
from medshare.models.account_models import Account, PasswordResetToken
from medshare.models.contact_models import EmergencyContact
from medshare.utils.clock import utcnow
from medshare.utils.password_util import hash_secret, verify_secret, is_strong_password
from medshare.utils.validation_util import is_valid_name, json_body, parse_birth_date, validate_profile_fields

def _current_account():
    return db.session.get(Account, g.owner.account_id)

def _public_url(link_id):
    return f"{current_app.config['FRONTEND_URL']}/public-profile/{link_id}"

def get_profile():
    return jsonify({'account': _current_account().to_dict()}), 200

def update_profile():
    account = _current_account()
    data = json_body()

    if not data.get('first_name') or not data.get('last_name'):
        return jsonify({'error': 'First name and last name are required'}), 400
    if not is_valid_name(data['first_name']) or not is_valid_name(data['last_name']):
        return jsonify({'error': 'Names must be 2-100 letters'}), 400
    profile_error = validate_profile_fields(data)
    if profile_error:
        return jsonify({'error': profile_error}), 400

    account.first_name = data['first_name'].strip()
    account.last_name = data['last_name'].strip()
    account.sex = data.get('sex')
    account.birth_date = parse_birth_date(data['birth_date']) if data.get('birth_date') else None
    account.phone = data['phone'].strip() if data.get('phone') else None
    db.session.commit()

    return jsonify({'message': 'Profile updated successfully', 'account': account.to_dict()}), 200

def change_password():
    account = _current_account()
    data = json_body()

    if not data.get('current_password') or not data.get('new_password'):
        return jsonify({'error': 'Current and new passwords required'}), 400
    if not is_strong_password(data['new_password']):
        return jsonify({'error': 'Password must be 8-100 characters with a lowercase letter, an uppercase letter and a digit'}), 400
    if not verify_secret(data['current_password'], account.password_hash):
        return jsonify({'error': 'Invalid current password'}), 400

    account.password_hash = hash_secret(data['new_password'])
    account.password_changed_at = utcnow()
    db.session.commit()
    return jsonify({'message': 'Password changed successfully'}), 200

def generate_public_link():
    """Sets the public-access password and makes sure the account has a link id."""
    account = _current_account()
    data = json_body()
    public_password = data.get('public_password')

    if not public_password:
        return jsonify({'error': 'Public access password is required'}), 400
    if not isinstance(public_password, str) or not 6 <= len(public_password) <= 50:
        return jsonify({'error': 'Public access password must be 6-50 characters'}), 400
    if verify_secret(public_password, account.password_hash):
        return jsonify({'error': 'Public access password must differ from your login password'}), 400

    link_id = account.enable_public_link(hash_secret(public_password))
    db.session.commit()

    return jsonify({
        'message': 'Public link generated successfully',
        'public_link_id': link_id,
        'public_url': _public_url(link_id)
    }), 200

def get_public_link_info():
    account = _current_account()
    return jsonify({
        'has_public_link': bool(account.public_link_id),
        'has_public_password': bool(account.public_password_hash),
        'public_url': _public_url(account.public_link_id) if account.has_public_link else None,
        'owner_name': account.full_name
    }), 200

def disable_public_link():
    account = _current_account()
    account.disable_public_link()
    db.session.commit()
    return jsonify({'message': 'Public link disabled successfully'}), 200

def delete_account():
    """Deactivates the account and wipes its medical data, contacts and reset tokens.

    The public link id is kept so old links keep resolving to a gone account.
    """
    account = _current_account()
    data = json_body()

    if not data.get('password'):
        return jsonify({'error': 'Password is required to delete the account'}), 400
    if not verify_secret(data['password'], account.password_hash):
        return jsonify({'error': 'Incorrect password'}), 400

    try:
        EmergencyContact.query.filter_by(account_id=account.id).delete(synchronize_session=False)
        PasswordResetToken.query.filter_by(account_id=account.id).delete(synchronize_session=False)
        if account.medical_record:
            account.medical_record.clear()
        account.is_active = False
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise

    current_app.logger.info(f"Account {account.id} deactivated by its owner")
    return jsonify({'message': 'Account deleted successfully'}), 200