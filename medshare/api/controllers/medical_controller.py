from flask import jsonify, g
from medshare.models.medical_models import BLOOD_TYPES, MEDICAL_LIST_FIELDS
from medshare.services import get_services
from medshare.services.medical_service import MedicalRecordUpdate
from medshare.utils.validation_util import json_body, validate_string_list

def get_medical_info():
    view = get_services().medical.read(g.owner.account_id)
    return jsonify({'medical_info': view.to_dict()}), 200

def update_medical_info():
    """Replaces blood type and the four encrypted lists in one write."""
    data = json_body()

    blood_type = data.get('blood_type') or None
    if blood_type is not None and blood_type not in BLOOD_TYPES:
        return jsonify({'error': f"Invalid blood type. Accepted: {', '.join(BLOOD_TYPES)}"}), 400

    lists = {}
    for name in MEDICAL_LIST_FIELDS:
        value = data.get(name)
        if value is None:
            lists[name] = []
            continue
        list_error = validate_string_list(value, name)
        if list_error:
            return jsonify({'error': list_error}), 400
        lists[name] = [item.strip() for item in value]

    update = MedicalRecordUpdate(blood_type=blood_type, **lists)
    view = get_services().medical.update(g.owner.account_id, update)
    return jsonify({'message': 'Medical information updated successfully', 'medical_info': view.to_dict()}), 200

def clear_medical_info():
    get_services().medical.clear(g.owner.account_id)
    return jsonify({'message': 'Medical information removed successfully'}), 200
