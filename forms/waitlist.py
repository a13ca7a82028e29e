from wtforms import Form, StringField, TextAreaField, BooleanField
from wtforms.validators import DataRequired, Email, Length, Regexp, AnyOf, StopValidation, ValidationError
from models.waitlist import COMPANY_SIZES, INDUSTRIES, HEAR_ABOUT_SOURCES

PHONE_PATTERN = r'^\+?[\d\s\-\(\)]+$'


def _clean(value):
    if isinstance(value, str):
        return value.strip()
    if value is None or isinstance(value, bool):
        return value
    return str(value).strip()


def _as_bool(value):
    # JSON sends booleans, HTML form posts send strings
    if isinstance(value, str):
        return value.strip().lower() in ('true', 'yes', 'on', '1')
    return bool(value)


def _optional(form, field):
    # WTForms' Optional() inspects raw formdata, which JSON payloads never set
    if not field.data:
        field.errors[:] = []
        raise StopValidation()


def _accepted(form, field):
    if field.data is not True:
        raise ValidationError('You must accept the terms and conditions')


class JSONForm(Form):
    """Form fed from a decoded JSON body rather than request.form."""

    def error_list(self):
        """Flatten WTForms errors into [{'field', 'message'}] in field order."""
        return [
            {'field': name, 'message': message}
            for name, field in self._fields.items()
            for message in field.errors
        ]


class RegistrationForm(JSONForm):
    firstName = StringField('First name', filters=[_clean], validators=[
        DataRequired('First name is required'),
        Length(min=2, message='First name must be at least 2 characters'),
    ])
    lastName = StringField('Last name', filters=[_clean], validators=[
        DataRequired('Last name is required'),
        Length(min=2, message='Last name must be at least 2 characters'),
    ])
    email = StringField('Email', filters=[_clean], validators=[
        DataRequired('Email is required'),
        Email('Please enter a valid email address'),
    ])
    phone = StringField('Phone', filters=[_clean], validators=[
        _optional,
        Length(min=10, message='Phone number must be at least 10 digits'),
        Regexp(PHONE_PATTERN, message='Please enter a valid phone number'),
    ])
    company = StringField('Company', filters=[_clean], validators=[
        DataRequired('Company name is required'),
        Length(min=2, message='Company name must be at least 2 characters'),
    ])
    role = StringField('Role', filters=[_clean], validators=[
        DataRequired('Role is required'),
        Length(min=2, message='Role must be at least 2 characters'),
    ])
    companySize = StringField('Company size', filters=[_clean], validators=[
        DataRequired('Please select company size'),
        AnyOf(COMPANY_SIZES, message='Please select a valid company size'),
    ])
    industry = StringField('Industry', filters=[_clean], validators=[
        DataRequired('Please select industry'),
        AnyOf(INDUSTRIES, message='Please select a valid industry'),
    ])
    currentTools = TextAreaField('Current tools', filters=[_clean], validators=[_optional])
    painPoints = TextAreaField('Pain points', filters=[_clean], validators=[
        DataRequired('Please describe your main challenges'),
        Length(min=10, message='Please describe your main challenges (minimum 10 characters)'),
    ])
    hearAbout = StringField('How did you hear about us', filters=[_clean], validators=[
        DataRequired('Please tell us how you heard about us'),
        AnyOf(HEAR_ABOUT_SOURCES, message='Please select how you heard about us'),
    ])
    newsletter = BooleanField('Newsletter')
    termsAccepted = BooleanField('Terms', validators=[_accepted])

    def __init__(self, data=None, require_phone=False, **kwargs):
        data = dict(data) if isinstance(data, dict) else {}
        # older clients post the checkbox as "terms"
        if 'termsAccepted' not in data and 'terms' in data:
            data['termsAccepted'] = data['terms']
        for key in ('newsletter', 'termsAccepted'):
            if key in data:
                data[key] = _as_bool(data[key])
        super().__init__(data=data, **kwargs)
        if require_phone:
            self.phone.validators = [DataRequired('Phone number is required')] + list(self.phone.validators[1:])


class VerificationForm(JSONForm):
    email = StringField('Email', filters=[_clean], validators=[
        DataRequired('Email is required'),
        Email('Please enter a valid email address'),
    ])
    code = StringField('Code', filters=[_clean], validators=[DataRequired('Verification code is required')])


class ResendForm(JSONForm):
    email = StringField('Email', filters=[_clean], validators=[
        DataRequired('Email is required'),
        Email('Please enter a valid email address'),
    ])
