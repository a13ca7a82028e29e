import os
from dotenv import load_dotenv

load_dotenv()

# Flask settings
SECRET_KEY = os.environ.get('SECRET_KEY', 'dev_key_for_development')
DEBUG = os.environ.get('FLASK_DEBUG', 'false').lower() in ['true', 'yes', '1']
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

# Database settings
SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', 'sqlite:///hireai_waitlist.db')
SQLALCHEMY_TRACK_MODIFICATIONS = False

# Admin tokens
JWT_SECRET_KEY = os.environ.get('JWT_SECRET', 'dev-jwt-secret')
JWT_ALGORITHM = 'HS256'
JWT_EXPIRES_HOURS = int(os.environ.get('JWT_EXPIRES_HOURS', 24))

# Mail settings (verification code delivery)
MAIL_SERVER = os.environ.get('MAIL_SERVER', 'smtp.gmail.com')
MAIL_PORT = int(os.environ.get('MAIL_PORT', 587))
MAIL_USE_TLS = os.environ.get('MAIL_USE_TLS', 'true').lower() in ['true', 'yes', '1']
MAIL_USERNAME = os.environ.get('MAIL_USERNAME')
MAIL_PASSWORD = os.environ.get('MAIL_PASSWORD')
MAIL_DEFAULT_SENDER = os.environ.get('MAIL_DEFAULT_SENDER', 'HireAI <noreply@hireai.com>')
MAIL_TIMEOUT = float(os.environ.get('MAIL_TIMEOUT', 10))

# Waitlist policy
WAITLIST_VERIFICATION_ENABLED = os.environ.get('WAITLIST_VERIFICATION_ENABLED', 'true').lower() in ['true', 'yes', '1']
WAITLIST_REQUIRE_PHONE = os.environ.get('WAITLIST_REQUIRE_PHONE', 'false').lower() in ['true', 'yes', '1']
VERIFICATION_CODE_TTL_MINUTES = int(os.environ.get('VERIFICATION_CODE_TTL_MINUTES', 10))
VERIFICATION_CODE_LENGTH = 6

# Analytics
ANALYTICS_DEFAULT_DAYS = int(os.environ.get('ANALYTICS_DEFAULT_DAYS', 30))
ANALYTICS_TOP_WORDS = 20
