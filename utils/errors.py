"""
Error types shared by the waitlist services and the HTTP layer.

Every error carries a stable machine-readable ``kind`` and an HTTP status.
The app factory turns them into JSON responses.
"""


class WaitlistError(Exception):
    kind = 'Internal'
    status_code = 500
    default_message = 'Something went wrong'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self):
        return {
            'status': 'fail' if self.status_code < 500 else 'error',
            'error': self.kind,
            'message': self.message,
        }


class ValidationFailed(WaitlistError):
    kind = 'ValidationFailed'
    status_code = 400
    default_message = 'Validation failed'

    def __init__(self, errors, message=None):
        # errors is a list of {'field': ..., 'message': ...}
        self.errors = list(errors)
        super().__init__(message)

    @classmethod
    def for_field(cls, field, message):
        return cls([{'field': field, 'message': message}])

    def to_dict(self):
        body = super().to_dict()
        body['errors'] = self.errors
        return body


class DuplicateRegistration(WaitlistError):
    kind = 'DuplicateRegistration'
    status_code = 400
    default_message = 'Email already registered'


class NotFound(WaitlistError):
    kind = 'NotFound'
    status_code = 404
    default_message = 'No waitlist registration found for this email'


class AlreadyVerified(WaitlistError):
    kind = 'AlreadyVerified'
    status_code = 400
    default_message = 'This registration is already verified'


class CodeExpired(WaitlistError):
    kind = 'CodeExpired'
    status_code = 400
    default_message = 'Verification code has expired. Please request a new one.'


class CodeMismatch(WaitlistError):
    kind = 'CodeMismatch'
    status_code = 400
    default_message = 'Invalid verification code'


class Unauthorized(WaitlistError):
    kind = 'Unauthorized'
    status_code = 401
    default_message = 'Not authorized to access this route'


class Forbidden(WaitlistError):
    kind = 'Forbidden'
    status_code = 403
    default_message = 'You do not have permission to perform this action'


class Internal(WaitlistError):
    pass
