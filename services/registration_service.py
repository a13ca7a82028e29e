import logging
from dataclasses import dataclass
from flask import current_app
from sqlalchemy.exc import IntegrityError
from forms.waitlist import RegistrationForm
from models.admin import db
from models.waitlist import WaitlistEntry, ENTRY_STATUSES, normalize_email, normalize_phone
from services import verification_service
from utils.errors import ValidationFailed, DuplicateRegistration, NotFound

logger = logging.getLogger(__name__)


@dataclass
class RegistrationResult:
    email: str
    first_name: str
    verification_required: bool
    code_delivered: bool = False

    def to_dict(self):
        return {
            'email': self.email,
            'firstName': self.first_name,
            'verification': {
                'required': self.verification_required,
                'codeDelivered': self.code_delivered,
            },
        }


def validate_registration(payload: dict) -> dict:
    """Validate a registration payload, reporting every bad field at once."""
    form = RegistrationForm(payload, require_phone=current_app.config['WAITLIST_REQUIRE_PHONE'])
    if not form.validate():
        errors = form.error_list()
        logger.warning(f"Registration rejected: {[e['field'] for e in errors]}")
        raise ValidationFailed(errors)
    return form.data


def _duplicate_for(email, phone):
    if WaitlistEntry.query.filter_by(email=email).first():
        return DuplicateRegistration('Email already registered')
    if phone and WaitlistEntry.query.filter_by(phone=phone).first():
        return DuplicateRegistration('Phone number already registered')
    return None


def register(payload: dict) -> RegistrationResult:
    data = validate_registration(payload)
    email = normalize_email(data['email'])
    phone = normalize_phone(data.get('phone'))

    duplicate = _duplicate_for(email, phone)
    if duplicate:
        logger.warning(f"Duplicate registration attempt for {email}")
        raise duplicate

    verification_enabled = current_app.config['WAITLIST_VERIFICATION_ENABLED']
    entry = WaitlistEntry(
        email=email,
        phone=phone,
        first_name=data['firstName'],
        last_name=data['lastName'],
        company=data['company'],
        role=data['role'],
        company_size=data['companySize'],
        industry=data['industry'],
        current_tools=data.get('currentTools') or '',
        pain_points=data['painPoints'],
        hear_about=data['hearAbout'],
        newsletter=bool(data.get('newsletter')),
        terms_accepted=True,
        is_verified=not verification_enabled,
    )

    try:
        db.session.add(entry)
        db.session.commit()
    except IntegrityError:
        # Another request won the race between the lookup and the insert
        db.session.rollback()
        logger.warning(f"Unique constraint rejected registration for {email}")
        raise _duplicate_for(email, phone) or DuplicateRegistration()

    logger.info(f"New waitlist registration: {email}")

    result = RegistrationResult(
        email=entry.email,
        first_name=entry.first_name,
        verification_required=verification_enabled,
    )
    if verification_enabled:
        result.code_delivered = verification_service.issue_code(entry)
    return result


def list_entries(search=None, status=None, page=None, per_page=None):
    """Newest first. Returns every entry unless a page is requested."""
    query = WaitlistEntry.query
    if status:
        query = query.filter(WaitlistEntry.status == status)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(db.or_(
            WaitlistEntry.email.ilike(pattern),
            WaitlistEntry.first_name.ilike(pattern),
            WaitlistEntry.last_name.ilike(pattern),
            WaitlistEntry.company.ilike(pattern),
        ))
    query = query.order_by(WaitlistEntry.created_at.desc(), WaitlistEntry.id.desc())

    if page is None:
        entries = query.all()
        return {'entries': entries, 'total': len(entries), 'page': 1, 'pages': 1}

    pagination = query.paginate(page=page, per_page=per_page or 10, error_out=False)
    return {
        'entries': pagination.items,
        'total': pagination.total,
        'page': pagination.page,
        'pages': pagination.pages,
    }


def waitlist_stats():
    total = WaitlistEntry.query.count()
    verified = WaitlistEntry.query.filter_by(is_verified=True).count()
    by_status = dict(
        db.session.query(WaitlistEntry.status, db.func.count(WaitlistEntry.id))
        .group_by(WaitlistEntry.status)
        .all()
    )
    return {
        'total': total,
        'verified': verified,
        'pending': total - verified,
        'byStatus': {status: by_status.get(status, 0) for status in ENTRY_STATUSES},
    }


def update_entry_status(entry_id: int, status: str) -> WaitlistEntry:
    if status not in ENTRY_STATUSES:
        raise ValidationFailed.for_field('status', f"Status must be one of: {', '.join(ENTRY_STATUSES)}")

    entry = db.session.get(WaitlistEntry, entry_id)
    if not entry:
        raise NotFound('Entry not found')

    entry.status = status
    db.session.commit()
    logger.info(f"Waitlist entry {entry.email} marked {status}")
    return entry
