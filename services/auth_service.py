"""
Admin authentication: password login, JWT access tokens and admin accounts.

Provides:
- authenticate: check credentials and issue a token
- create_access_token / decode_access_token: HS256 JWTs signed with JWT_SECRET_KEY
- load_admin_from_request: Flask-Login request loader for "Authorization: Bearer" headers
- create_admin / list_admins / toggle_admin_status: super admin account management
"""
import logging
from datetime import timedelta
from flask import current_app
from jose import jwt, JWTError
from models.admin import db, AdminPrincipal, ADMIN_ROLES
from models.waitlist import normalize_email
from utils.date_utils import utcnow
from utils.errors import Unauthorized, ValidationFailed, DuplicateRegistration, NotFound

logger = logging.getLogger(__name__)


def create_access_token(admin: AdminPrincipal) -> str:
    """Create a JWT access token for an admin.

    Args:
        admin: The authenticated admin

    Returns:
        Encoded JWT string
    """
    now = utcnow()
    payload = {
        'sub': str(admin.id),
        'role': admin.role,
        'iat': now,
        'exp': now + timedelta(hours=current_app.config['JWT_EXPIRES_HOURS']),
    }
    return jwt.encode(
        payload,
        current_app.config['JWT_SECRET_KEY'],
        algorithm=current_app.config['JWT_ALGORITHM'],
    )


def decode_access_token(token: str):
    """Return the admin id in a token, or None if it is invalid or expired."""
    try:
        payload = jwt.decode(
            token,
            current_app.config['JWT_SECRET_KEY'],
            algorithms=[current_app.config['JWT_ALGORITHM']],
        )
        return int(payload['sub'])
    except (JWTError, KeyError, TypeError, ValueError) as e:
        logger.debug(f"Rejected access token: {e}")
        return None


def authenticate(email: str, password: str):
    """Check admin credentials. Returns (token, admin)."""
    if not email or not password:
        raise ValidationFailed([
            {'field': name, 'message': f"{name.capitalize()} is required"}
            for name, value in (('email', email), ('password', password))
            if not value
        ], 'Please provide email and password')

    admin = AdminPrincipal.query.filter_by(email=normalize_email(email)).first()
    if not admin or not admin.check_password(password):
        logger.warning(f"Login failed for {email}")
        raise Unauthorized('Incorrect email or password')

    if not admin.is_active:
        logger.warning(f"Login refused for deactivated admin {email}")
        raise Unauthorized('Your account has been deactivated')

    admin.last_login_at = utcnow()
    db.session.commit()

    logger.info(f"Admin login successful: {admin.email} ({admin.role})")
    return create_access_token(admin), admin


def load_admin_from_request(request):
    auth_header = request.headers.get('Authorization', '')
    if not auth_header.startswith('Bearer '):
        return None

    admin_id = decode_access_token(auth_header.split(' ', 1)[1].strip())
    if admin_id is None:
        return None

    admin = db.session.get(AdminPrincipal, admin_id)
    if not admin or not admin.is_active:
        return None
    return admin


def create_admin(email: str, password: str, name: str, role: str = 'admin') -> AdminPrincipal:
    errors = []
    if not email or '@' not in email:
        errors.append({'field': 'email', 'message': 'Invalid email address'})
    if not password or len(password) < 8:
        errors.append({'field': 'password', 'message': 'Password must be at least 8 characters'})
    if not name or len(name.strip()) < 2:
        errors.append({'field': 'name', 'message': 'Name must be at least 2 characters'})
    if role not in ADMIN_ROLES:
        errors.append({'field': 'role', 'message': f"Role must be one of: {', '.join(ADMIN_ROLES)}"})
    if errors:
        raise ValidationFailed(errors)

    email = normalize_email(email)
    if AdminPrincipal.query.filter_by(email=email).first():
        raise DuplicateRegistration('Email already registered')

    admin = AdminPrincipal(email=email, name=name.strip(), role=role)
    admin.set_password(password)
    db.session.add(admin)
    db.session.commit()
    logger.info(f"Created {role} account {email}")
    return admin


def list_admins():
    return AdminPrincipal.query.order_by(AdminPrincipal.created_at.asc()).all()


def toggle_admin_status(admin_id: int, acting_admin: AdminPrincipal) -> AdminPrincipal:
    admin = db.session.get(AdminPrincipal, admin_id)
    if not admin:
        raise NotFound('Admin not found')
    if admin.id == acting_admin.id:
        raise ValidationFailed.for_field('adminId', 'You cannot deactivate your own account')

    admin.is_active = not admin.is_active
    db.session.commit()
    logger.info(f"Admin {admin.email} is_active={admin.is_active}")
    return admin
