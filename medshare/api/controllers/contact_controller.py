from flask import jsonify, g, current_app
from medshare.extensions import db
from medshare.models.contact_models import EmergencyContact
from medshare.utils.validation_util import is_valid_name, is_valid_phone, json_body

def _owned_contact(contact_id):
    return EmergencyContact.query.filter_by(id=contact_id, account_id=g.owner.account_id).first()

def _validate_contact(data):
    if not data.get('name') or not data.get('phone'):
        return 'Contact name and phone are required'
    if not is_valid_name(data['name']):
        return 'Contact name must be 2-100 letters'
    if not is_valid_phone(data['phone']):
        return 'Invalid phone format'
    relationship = data.get('relationship')
    if relationship is not None and (not isinstance(relationship, str) or not 1 <= len(relationship.strip()) <= 50):
        return 'Relationship must be 1-50 characters'
    return None

def _find_duplicate(name, phone, exclude_id=None):
    query = EmergencyContact.query.filter_by(account_id=g.owner.account_id, name=name, phone=phone)
    if exclude_id is not None:
        query = query.filter(EmergencyContact.id != exclude_id)
    return query.first()

def list_contacts():
    contacts = (EmergencyContact.query
                .filter_by(account_id=g.owner.account_id)
                .order_by(EmergencyContact.id)
                .all())
    return jsonify({'contacts': [c.to_dict() for c in contacts], 'total': len(contacts)}), 200

def get_contact(contact_id):
    contact = _owned_contact(contact_id)
    if not contact:
        return jsonify({'error': 'Emergency contact not found'}), 404
    return jsonify({'contact': contact.to_dict()}), 200

def create_contact():
    data = json_body()
    validation_error = _validate_contact(data)
    if validation_error:
        return jsonify({'error': validation_error}), 400

    limit = current_app.config['MAX_EMERGENCY_CONTACTS']
    if EmergencyContact.query.filter_by(account_id=g.owner.account_id).count() >= limit:
        return jsonify({'error': f'Maximum of {limit} emergency contacts reached'}), 400

    name, phone = data['name'].strip(), data['phone'].strip()
    if _find_duplicate(name, phone):
        return jsonify({'error': 'A contact with this name and phone already exists'}), 409

    contact = EmergencyContact(
        account_id=g.owner.account_id,
        name=name,
        relationship=data['relationship'].strip() if data.get('relationship') else None,
        phone=phone
    )
    db.session.add(contact)
    db.session.commit()
    return jsonify({'message': 'Emergency contact created successfully', 'contact': contact.to_dict()}), 201

def update_contact(contact_id):
    contact = _owned_contact(contact_id)
    if not contact:
        return jsonify({'error': 'Emergency contact not found'}), 404

    data = json_body()
    validation_error = _validate_contact(data)
    if validation_error:
        return jsonify({'error': validation_error}), 400

    name, phone = data['name'].strip(), data['phone'].strip()
    if _find_duplicate(name, phone, exclude_id=contact.id):
        return jsonify({'error': 'Another contact with this name and phone already exists'}), 409

    contact.name = name
    contact.phone = phone
    contact.relationship = data['relationship'].strip() if data.get('relationship') else None
    db.session.commit()
    return jsonify({'message': 'Emergency contact updated successfully', 'contact': contact.to_dict()}), 200

def delete_contact(contact_id):
    contact = _owned_contact(contact_id)
    if not contact:
        return jsonify({'error': 'Emergency contact not found'}), 404
    db.session.delete(contact)
    db.session.commit()
    return jsonify({'message': 'Emergency contact deleted successfully'}), 200
