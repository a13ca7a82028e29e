import re
from sqlalchemy.orm import validates
from utils.date_utils import utcnow
from .admin import db

COMPANY_SIZES = ('1-10', '11-50', '51-200', '201-1000', '1000+')
INDUSTRIES = (
    'technology', 'healthcare', 'finance', 'education',
    'retail', 'manufacturing', 'consulting', 'other',
)
HEAR_ABOUT_SOURCES = ('google', 'linkedin', 'twitter', 'referral', 'blog', 'event', 'other')
ENTRY_STATUSES = ('pending', 'approved', 'rejected')

# (header, attribute) pairs, in export order
CSV_COLUMNS = (
    ('First Name', 'first_name'),
    ('Last Name', 'last_name'),
    ('Email', 'email'),
    ('Phone', 'phone'),
    ('Company', 'company'),
    ('Role', 'role'),
    ('Company Size', 'company_size'),
    ('Industry', 'industry'),
    ('Current Tools', 'current_tools'),
    ('Pain Points', 'pain_points'),
    ('How They Heard About Us', 'hear_about'),
    ('Newsletter Subscribed', 'newsletter'),
    ('Verified', 'is_verified'),
    ('Registration Date', 'created_at'),
)


def normalize_email(value):
    return (value or '').strip().lower()


def normalize_phone(value):
    """Keep a leading '+' and the digits; drop spaces, dashes and parentheses."""
    if not value:
        return None
    value = value.strip()
    digits = re.sub(r'\D', '', value)
    if not digits:
        return None
    return f'+{digits}' if value.startswith('+') else digits


class WaitlistEntry(db.Model):
    __tablename__ = 'waitlist_entries'
    __table_args__ = (
        db.UniqueConstraint('email', name='uq_waitlist_entries_email'),
        db.UniqueConstraint('phone', name='uq_waitlist_entries_phone'),
        db.Index('ix_waitlist_entries_created_at', 'created_at'),
    )

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(254), nullable=False)
    phone = db.Column(db.String(32))

    # Profile
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    company = db.Column(db.String(200), nullable=False)
    role = db.Column(db.String(100), nullable=False)
    company_size = db.Column(db.String(20), nullable=False)
    industry = db.Column(db.String(50), nullable=False)
    current_tools = db.Column(db.Text, default='')
    pain_points = db.Column(db.Text, nullable=False)
    hear_about = db.Column(db.String(50), nullable=False)
    newsletter = db.Column(db.Boolean, nullable=False, default=False)
    terms_accepted = db.Column(db.Boolean, nullable=False)

    # Verification state; the code only exists while the entry is pending
    is_verified = db.Column(db.Boolean, nullable=False, default=False)
    verification_code = db.Column(db.String(6))
    verification_code_expires_at = db.Column(db.DateTime)

    # Admin review state
    status = db.Column(db.String(20), nullable=False, default='pending')

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f'<WaitlistEntry {self.email}>'

    @validates('terms_accepted')
    def validate_terms_accepted(self, key, value):
        if value is not True:
            raise ValueError('Terms must be accepted to join the waitlist')
        return value

    @validates('email')
    def validate_email(self, key, value):
        return normalize_email(value)

    @property
    def is_pending(self):
        return not self.is_verified

    def mark_verified(self):
        self.is_verified = True
        self.verification_code = None
        self.verification_code_expires_at = None

    def to_dict(self):
        return {
            'id': self.id,
            'firstName': self.first_name,
            'lastName': self.last_name,
            'email': self.email,
            'phone': self.phone,
            'company': self.company,
            'role': self.role,
            'companySize': self.company_size,
            'industry': self.industry,
            'currentTools': self.current_tools or '',
            'painPoints': self.pain_points,
            'hearAbout': self.hear_about,
            'newsletter': self.newsletter,
            'isVerified': self.is_verified,
            'status': self.status,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }

    def to_csv_row(self):
        row = []
        for _, attr in CSV_COLUMNS:
            value = getattr(self, attr)
            if isinstance(value, bool):
                value = 'true' if value else 'false'
            elif attr == 'created_at':
                value = value.isoformat() if value else ''
            elif value is None:
                value = ''
            row.append(value)
        return row
