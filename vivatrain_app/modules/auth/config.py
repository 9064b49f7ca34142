# File: vivatrain_app/modules/auth/config.py

class AuthModuleDefaultConfig:
    AUTH_MIN_PASSWORD_LENGTH = 8
