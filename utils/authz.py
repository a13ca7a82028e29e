"""
Which admin role may do what, checked before a view runs.
"""
from functools import wraps
from flask_login import current_user
from utils.errors import Unauthorized, Forbidden

WAITLIST_READ = 'waitlist:read'
WAITLIST_UPDATE = 'waitlist:update'
ANALYTICS_READ = 'analytics:read'
ANALYTICS_EXPORT = 'analytics:export'
ADMINS_MANAGE = 'admins:manage'

POLICY = {
    'admin': frozenset([WAITLIST_READ, WAITLIST_UPDATE, ANALYTICS_READ, ANALYTICS_EXPORT]),
    'super_admin': frozenset([WAITLIST_READ, WAITLIST_UPDATE, ANALYTICS_READ, ANALYTICS_EXPORT, ADMINS_MANAGE]),
}


def is_allowed(role, action):
    return action in POLICY.get(role, frozenset())


def permission_required(action=None):
    """Require an authenticated admin, and when ``action`` is given, a role allowed to do it."""
    def decorator(view):
        @wraps(view)
        def wrapped(*args, **kwargs):
            if not current_user.is_authenticated:
                raise Unauthorized()
            if action is not None and not is_allowed(current_user.role, action):
                raise Forbidden()
            return view(*args, **kwargs)
        return wrapped
    return decorator
