"""Medical info endpoints and the encrypted storage behind them."""
from medshare.extensions import db
from medshare.models.medical_models import MEDICAL_LIST_FIELDS, MedicalRecord
from medshare.services.medical_service import MedicalRecordUpdate

FULL_UPDATE = {
    'blood_type': 'O-',
    'allergies': ['peanuts', ' penicillin '],
    'medications': ['insulin'],
    'conditions': ['type 1 diabetes'],
    'surgeries': [],
}


def _record(account_id):
    db.session.expire_all()
    return MedicalRecord.query.filter_by(account_id=account_id).one()


def test_update_encrypts_every_list_field(client, owner, services):
    account, headers = owner
    response = client.put('/api/medical/info', json=FULL_UPDATE, headers=headers)
    assert response.status_code == 200
    assert response.get_json()['medical_info']['allergies'] == ['peanuts', 'penicillin']

    record = _record(account['id'])
    assert record.blood_type == 'O-'
    for name in MEDICAL_LIST_FIELDS:
        pair = record.get_field(name)
        assert pair.ciphertext and pair.iv
        assert 'peanuts' not in pair.ciphertext
        assert isinstance(services.codec.decrypt(pair.ciphertext, pair.iv), list)


def test_missing_lists_are_stored_as_empty(client, owner):
    account, headers = owner
    client.put('/api/medical/info', json={'blood_type': 'A+', 'allergies': ['latex']}, headers=headers)

    info = client.get('/api/medical/info', headers=headers).get_json()['medical_info']
    assert info['allergies'] == ['latex']
    assert info['medications'] == [] and info['surgeries'] == []


def test_last_write_wins(client, owner):
    _, headers = owner
    client.put('/api/medical/info', json=FULL_UPDATE, headers=headers)
    client.put('/api/medical/info', json={'allergies': ['shellfish']}, headers=headers)

    info = client.get('/api/medical/info', headers=headers).get_json()['medical_info']
    assert info['allergies'] == ['shellfish']
    assert info['blood_type'] is None
    assert info['medications'] == []


def test_rejects_bad_input(client, owner):
    _, headers = owner
    assert client.put('/api/medical/info', json={'blood_type': 'Z+'}, headers=headers).status_code == 400
    assert client.put('/api/medical/info', json={'allergies': 'peanuts'}, headers=headers).status_code == 400
    assert client.put('/api/medical/info', json={'allergies': ['']}, headers=headers).status_code == 400


def test_clear_keeps_row_and_nulls_pairs(client, owner):
    account, headers = owner
    client.put('/api/medical/info', json=FULL_UPDATE, headers=headers)

    assert client.delete('/api/medical/info', headers=headers).status_code == 200
    record = _record(account['id'])
    assert record.blood_type is None
    assert all(record.get_field(name).is_empty for name in MEDICAL_LIST_FIELDS)


def test_corrupted_field_is_an_opaque_500(client, owner):
    account, headers = owner
    client.put('/api/medical/info', json=FULL_UPDATE, headers=headers)

    record = _record(account['id'])
    first_byte = int(record.allergies_ciphertext[:2], 16) ^ 0x01
    record.allergies_ciphertext = f'{first_byte:02x}' + record.allergies_ciphertext[2:]
    db.session.commit()

    response = client.get('/api/medical/info', headers=headers)
    assert response.status_code == 500
    assert response.get_json() == {'error': 'Internal error while processing protected data'}


def test_read_never_lists_ciphertext(client, owner):
    _, headers = owner
    client.put('/api/medical/info', json=FULL_UPDATE, headers=headers)
    body = client.get('/api/medical/info', headers=headers).get_data(as_text=True)
    assert 'ciphertext' not in body and '_iv' not in body


def test_interleaved_updates_leave_one_consistent_write(owner, services, mocker):
    account, _ = owner
    medical = services.medical
    first = MedicalRecordUpdate(blood_type='A+', allergies=['first-a'], medications=['first-m'],
                                conditions=['first-c'], surgeries=['first-s'])
    second = MedicalRecordUpdate(blood_type='B-', allergies=['second-a'], medications=['second-m'],
                                 conditions=['second-c'], surgeries=['second-s'])

    real_encrypt = medical.codec.encrypt
    calls = []

    def encrypt_then_interleave(value):
        calls.append(value)
        field = real_encrypt(value)
        # The second write runs to completion after the first has encrypted everything
        if len(calls) == len(MEDICAL_LIST_FIELDS):
            medical.update(account['id'], second)
        return field

    mocker.patch.object(medical.codec, 'encrypt', side_effect=encrypt_then_interleave)
    medical.update(account['id'], first)

    record = _record(account['id'])
    assert record.blood_type == 'A+'
    values = {}
    for name in MEDICAL_LIST_FIELDS:
        pair = record.get_field(name)
        values[name] = medical.codec.decrypt(pair.ciphertext, pair.iv)
    assert values == {name: [f'first-{name[0]}'] for name in MEDICAL_LIST_FIELDS}


def test_first_read_survives_concurrent_row_creation(owner, services, mocker):
    account, _ = owner
    existing = MedicalRecord.query.filter_by(account_id=account['id']).one()

    # Simulates another request inserting the row between the lookup and the insert
    mocker.patch.object(services.medical, '_find', side_effect=[None, existing])
    record = services.medical.get_or_create(account['id'])

    assert record.id == existing.id
    assert MedicalRecord.query.filter_by(account_id=account['id']).count() == 1
