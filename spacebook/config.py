import os
from dotenv import load_dotenv

load_dotenv(os.path.join(os.path.dirname(__file__), '.env'))

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-prod-0000000000'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///spacebook.db'
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    JWT_EXPIRATION_HOURS = int(os.environ.get('JWT_EXPIRATION_HOURS', 24))

    # Business Rules Defaults
    # Reject unknown statuses and illegal transitions on admin updates.
    # False keeps the legacy behaviour of accepting any status string.
    STRICT_STATUS_TRANSITIONS = os.environ.get('STRICT_STATUS_TRANSITIONS', 'true').lower() != 'false'
    DAY_WINDOW_START = 8   # 8 AM, first bookable hour listed by the slots endpoint
    DAY_WINDOW_END = 20    # 8 PM

class DevelopmentConfig(Config):
    DEBUG = True
    LOG_LEVEL = 'DEBUG'

class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret-key-for-the-test-suite-only'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'

class ProductionConfig(Config):
    DEBUG = False
    # In prod, rely on env vars strictly
