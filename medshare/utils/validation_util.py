# /medshare/utils/validation_util.py
import re
from datetime import date
from flask import abort, request

EMAIL_RE = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
NAME_RE = re.compile(r"^[^\W\d_]+(?:[ '\-][^\W\d_]+)*$")
PHONE_RE = re.compile(r'^[\d\s\-\(\)\+]+$')
SEX_CHOICES = ('male', 'female', 'other')


def is_valid_email(value) -> bool:
    return isinstance(value, str) and len(value) <= 255 and bool(EMAIL_RE.match(value.strip()))


def is_valid_name(value) -> bool:
    return isinstance(value, str) and 2 <= len(value.strip()) <= 100 and bool(NAME_RE.match(value.strip()))


def is_valid_phone(value) -> bool:
    return isinstance(value, str) and 8 <= len(value.strip()) <= 20 and bool(PHONE_RE.match(value.strip()))


def parse_birth_date(value):
    """ISO date in the past, at most 120 years ago. Raises ValueError otherwise."""
    if not isinstance(value, str):
        raise ValueError('Birth date must be a YYYY-MM-DD string')
    parsed = date.fromisoformat(value)
    today = date.today()
    if parsed >= today or today.year - parsed.year > 120:
        raise ValueError('Birth date must be in the past')
    return parsed


def validate_profile_fields(data):
    """Checks the optional profile fields shared by registration and profile updates.

    Returns an error message, or None when everything present is valid.
    """
    sex = data.get('sex')
    if sex is not None and sex not in SEX_CHOICES:
        return 'Sex must be one of: male, female, other'
    if data.get('birth_date') is not None:
        try:
            parse_birth_date(data['birth_date'])
        except ValueError:
            return 'Birth date must be a past date in YYYY-MM-DD format'
    phone = data.get('phone')
    if phone is not None and not is_valid_phone(phone):
        return 'Phone may only contain digits, spaces, parentheses, hyphens and plus signs'
    return None


def validate_string_list(value, field_name, max_items=50, max_length=100):
    """Medical list fields: a list of 1-100 character strings."""
    if not isinstance(value, list):
        return f'{field_name} must be a list'
    if len(value) > max_items:
        return f'{field_name} may contain at most {max_items} items'
    for item in value:
        if not isinstance(item, str) or not 1 <= len(item.strip()) <= max_length:
            return f'Each item in {field_name} must be a string of 1 to {max_length} characters'
    return None


def json_body():
    """The request's JSON object. Arrays, scalars and unparsable bodies abort with 400."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        abort(400, description='Request body must be a JSON object')
    return data
