"""
Email utility functions for the HireAI waitlist
"""
import smtplib
from flask import current_app, render_template
from flask_mail import Connection, Message, Mail

mail = Mail()


class TimeoutConnection(Connection):
    """Flask-Mail connection whose SMTP socket is time bounded from the connect onwards."""

    def __init__(self, mail_state, timeout):
        super().__init__(mail_state)
        self.timeout = timeout

    def configure_host(self):
        smtp_class = smtplib.SMTP_SSL if self.mail.use_ssl else smtplib.SMTP
        host = smtp_class(self.mail.server, self.mail.port, timeout=self.timeout)
        host.set_debuglevel(int(self.mail.debug))
        if self.mail.use_tls:
            host.starttls()
        if self.mail.username and self.mail.password:
            host.login(self.mail.username, self.mail.password)
        return host


def _deliver(msg):
    conn = TimeoutConnection(current_app.extensions['mail'], current_app.config['MAIL_TIMEOUT'])
    with conn:
        conn.send(msg)


def send_verification_code(email, code, first_name=None):
    """Send a waitlist verification code. Returns True if the message went out."""
    try:
        ttl = current_app.config['VERIFICATION_CODE_TTL_MINUTES']
        msg = Message(
            subject='Verify your HireAI Waitlist Registration',
            recipients=[email],
            sender=current_app.config['MAIL_DEFAULT_SENDER']
        )
        msg.body = render_template('emails/verification_code.txt', code=code, first_name=first_name, ttl=ttl)
        msg.html = render_template('emails/verification_code.html', code=code, first_name=first_name, ttl=ttl)

        _deliver(msg)
        current_app.logger.info(f"Verification email sent to {email}")
        return True

    except Exception as e:
        current_app.logger.error(f"Failed to send verification email to {email}: {str(e)}")
        return False


def send_waitlist_welcome(email, first_name):
    """Send the welcome email once a registration is verified"""
    try:
        msg = Message(
            subject='Welcome to the HireAI Waitlist!',
            recipients=[email],
            sender=current_app.config['MAIL_DEFAULT_SENDER']
        )
        msg.html = render_template('emails/waitlist_welcome.html', first_name=first_name)

        _deliver(msg)
        current_app.logger.info(f"Welcome email sent to {email}")
        return True

    except Exception as e:
        current_app.logger.error(f"Failed to send welcome email to {email}: {str(e)}")
        return False
