import hmac
import logging
import secrets
from datetime import timedelta
from flask import current_app
from models.admin import db
from models.waitlist import WaitlistEntry, normalize_email
from utils.date_utils import utcnow
from utils.email_utils import send_verification_code, send_waitlist_welcome
from utils.errors import NotFound, AlreadyVerified, CodeExpired, CodeMismatch

logger = logging.getLogger(__name__)


def generate_code(length: int = 6) -> str:
    return f"{secrets.randbelow(10 ** length):0{length}d}"


def _get_entry_for_update(email: str) -> WaitlistEntry:
    entry = (
        WaitlistEntry.query
        .filter_by(email=normalize_email(email))
        .with_for_update()
        .first()
    )
    if not entry:
        db.session.rollback()
        logger.warning(f"Verification requested for unknown email {normalize_email(email)}")
        raise NotFound()
    if not entry.is_pending:
        db.session.rollback()
        raise AlreadyVerified()
    return entry


def issue_code(entry: WaitlistEntry) -> bool:
    """
    Store a fresh code on a pending entry and send it out.

    Any previous code is overwritten. The entry stays persisted whatever
    happens during delivery; the return value says whether the email went out.
    """
    if not entry.is_pending:
        raise AlreadyVerified()

    ttl = current_app.config['VERIFICATION_CODE_TTL_MINUTES']
    entry.verification_code = generate_code(current_app.config['VERIFICATION_CODE_LENGTH'])
    entry.verification_code_expires_at = utcnow() + timedelta(minutes=ttl)
    db.session.commit()

    delivered = send_verification_code(entry.email, entry.verification_code, entry.first_name)
    if not delivered:
        logger.error(f"Verification code for {entry.email} was stored but could not be delivered")
    return delivered


def verify(email: str, code: str) -> WaitlistEntry:
    entry = _get_entry_for_update(email)

    expires_at = entry.verification_code_expires_at
    if not entry.verification_code or expires_at is None or utcnow() > expires_at:
        db.session.rollback()
        logger.warning(f"Expired verification code submitted for {entry.email}")
        raise CodeExpired()

    submitted = (code or '').strip().encode('utf-8')
    if not hmac.compare_digest(entry.verification_code.encode('utf-8'), submitted):
        db.session.rollback()
        logger.warning(f"Wrong verification code submitted for {entry.email}")
        raise CodeMismatch()

    entry.mark_verified()
    db.session.commit()
    logger.info(f"Waitlist entry {entry.email} verified")

    send_waitlist_welcome(entry.email, entry.first_name)
    return entry


def resend(email: str) -> bool:
    entry = _get_entry_for_update(email)
    delivered = issue_code(entry)
    logger.info(f"Verification code re-issued for {entry.email}")
    return delivered
