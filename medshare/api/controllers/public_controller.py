from flask import jsonify
from medshare.services import get_services
from medshare.utils.error_handlers import error_response
from medshare.utils.validation_util import json_body

def check_public_link(public_id):
    """Tells the frontend whether to show the password prompt. Reveals no owner data."""
    result = get_services().public_profiles.check_public_link(public_id)
    if not result.ok:
        return error_response(result)
    return jsonify(result.value), 200

def get_public_profile(public_id):
    """Returns the merged emergency view once both the link id and its password check out."""
    data = json_body()
    password = data.get('password')
    if not password or not isinstance(password, str):
        return jsonify({'error': 'Public access password is required'}), 400

    services = get_services()
    result = services.public_access.authorize(public_id, password)
    if not result.ok:
        return error_response(result)

    profile = services.public_profiles.build_public_profile(result.value)
    return jsonify({'profile': profile}), 200
