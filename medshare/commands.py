import secrets
import click
from flask import current_app
from flask.cli import with_appcontext
from sqlalchemy.exc import SQLAlchemyError
from medshare.extensions import db
from medshare.models.medical_models import MEDICAL_LIST_FIELDS, MedicalRecord
from medshare.services import get_services
from medshare.utils.encryption_util import CipherEngine
from medshare.utils.errors import ConfigurationError, MedShareError
from medshare.utils.structured_codec import StructuredCodec

@click.command('init-db')
@with_appcontext
def init_db_command():
    """Create every MedShare table."""
    db.create_all()
    click.echo("Database initialized successfully!")

@click.command('generate-keys')
def generate_keys_command():
    """Print fresh secrets for the .env file."""
    click.echo(f"JWT_SECRET_KEY={secrets.token_hex(32)}")
    click.echo(f"ENCRYPTION_KEY={secrets.token_hex(32)}")
    click.echo(f"SECRET_KEY={secrets.token_hex(32)}")
    click.echo("Store these outside version control. Losing ENCRYPTION_KEY makes stored medical data unreadable.")

@click.command('rotate-encryption-key')
@click.argument('new_key')
@with_appcontext
def rotate_encryption_key_command(new_key):
    """Re-encrypt every medical record under NEW_KEY in one transaction.

    Update ENCRYPTION_KEY to NEW_KEY and restart the application afterwards.
    """
    try:
        new_codec = StructuredCodec(CipherEngine.from_config_value(new_key))
    except ConfigurationError as e:
        raise click.BadParameter(str(e), param_hint='NEW_KEY')

    old_codec = get_services().codec
    rotated = 0
    try:
        for record in MedicalRecord.query.order_by(MedicalRecord.id).all():
            for name in MEDICAL_LIST_FIELDS:
                pair = record.get_field(name)
                value = old_codec.decrypt(pair.ciphertext, pair.iv)
                record.set_field(name, new_codec.encrypt(value))
            rotated += 1
        db.session.commit()
    except (MedShareError, SQLAlchemyError) as e:
        db.session.rollback()
        current_app.logger.error(f"Key rotation aborted after {rotated} records: {type(e).__name__}")
        raise click.ClickException(f"Key rotation aborted, nothing was changed: {type(e).__name__}")

    current_app.logger.info(f"Re-encrypted {rotated} medical records under a new master key")
    click.echo(f"Re-encrypted {rotated} medical records. Set ENCRYPTION_KEY to the new key and restart.")

def register_commands(app):
    app.cli.add_command(init_db_command)
    app.cli.add_command(generate_keys_command)
    app.cli.add_command(rotate_encryption_key_command)
