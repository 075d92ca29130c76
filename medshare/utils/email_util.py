# /medshare/utils/email_util.py
import smtplib
import ssl
import threading
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from flask import current_app

def _send_email(recipient_email: str, subject: str, text: str, html: str) -> bool:
    """
    Sends a plain-text + HTML email through the configured SMTP server.

    Delivery problems are logged and reported through the return value; they
    are never raised, so the operation that triggered the email still succeeds.

    Args:
        recipient_email (str): Destination address.
        subject (str): Subject line.
        text (str): Plain-text body.
        html (str): HTML body.

    Returns:
        bool: True when the server accepted the message.
    """
    config = current_app.config
    mail_server = config.get('MAIL_SERVER')
    mail_port = config.get('MAIL_PORT', 587)
    mail_username = config.get('MAIL_USERNAME')
    mail_password = config.get('MAIL_PASSWORD')

    if not all([mail_server, mail_port, mail_username, mail_password]):
        current_app.logger.warning(f"Email server is not configured. Skipping '{subject}' email.")
        return False

    message = MIMEMultipart("alternative")
    message["Subject"] = subject
    message["From"] = mail_username
    message["To"] = recipient_email
    message.attach(MIMEText(text, "plain"))
    message.attach(MIMEText(html, "html"))

    try:
        with smtplib.SMTP(mail_server, mail_port) as server:
            if config.get('MAIL_USE_TLS', True):
                server.starttls(context=ssl.create_default_context())
            server.login(mail_username, mail_password)
            server.sendmail(mail_username, recipient_email, message.as_string())
        current_app.logger.info(f"Sent '{subject}' email to account address")
        return True
    except (smtplib.SMTPException, OSError) as e:
        current_app.logger.error(f"Failed to send '{subject}' email: {e}")
        return False

def send_in_background(send_func, *args):
    """Runs an email helper on a daemon thread with its own app context.

    Returns the started thread. With MAIL_SEND_ASYNC off the helper runs inline
    and None is returned.
    """
    app = current_app._get_current_object()
    if not app.config.get('MAIL_SEND_ASYNC', True):
        _report_delivery(app, send_func(*args))
        return None

    thread = threading.Thread(target=_deliver, args=(app, send_func, args), daemon=True)
    thread.start()
    return thread

def _deliver(app, send_func, args):
    with app.app_context():
        _report_delivery(app, send_func(*args))

def _report_delivery(app, delivered):
    if not delivered:
        app.logger.warning("Email was not delivered")

def send_welcome_email(recipient_email: str, first_name: str) -> bool:
    text = f"""
    Hello {first_name},

    Your MedShare account is ready. Add your medical information and emergency
    contacts, then create a public link so first responders can reach them.
    """

    html = f"""
    <html>
      <body>
        <h2>Welcome to MedShare</h2>
        <p>Hello {first_name},</p>
        <p>Your account is ready. Add your medical information and emergency contacts,
        then create a public link so first responders can reach them.</p>
      </body>
    </html>
    """
    return _send_email(recipient_email, "Welcome to MedShare", text, html)

def send_password_reset_email(recipient_email: str, first_name: str, reset_token: str) -> bool:
    reset_url = f"{current_app.config['FRONTEND_URL']}/reset-password/{reset_token}"

    text = f"""
    Hello {first_name},

    We received a request to reset your MedShare password.
    Use this link within one hour: {reset_url}

    If you did not ask for this, you can ignore this email.
    """

    html = f"""
    <html>
      <body>
        <h2>Password reset</h2>
        <p>Hello {first_name},</p>
        <p>We received a request to reset your MedShare password.</p>
        <p><a href="{reset_url}">Reset your password</a> (valid for one hour).</p>
        <p>If you did not ask for this, you can ignore this email.</p>
      </body>
    </html>
    """
    return _send_email(recipient_email, "Reset your MedShare password", text, html)
