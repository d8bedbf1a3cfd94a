"""Application-wide constants.

This module defines constants used throughout the application
to avoid magic numbers and ensure consistency.
"""

# String field lengths
MAX_USERNAME_LENGTH = 255
MAX_EMAIL_LENGTH = 255
MAX_NAME_LENGTH = 255
MAX_ROLE_NAME_LENGTH = 100
MAX_PERMISSION_NAME_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 255
MAX_STATUS_LENGTH = 16
MAX_PHONE_LENGTH = 32
MAX_URL_LENGTH = 2048
MAX_TOKEN_LENGTH = 1024

# Password requirements
MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_LENGTH = 72
MAX_PASSWORD_BYTES = 72  # bcrypt rejects longer input
BCRYPT_ROUNDS = 12
MIN_BCRYPT_ROUNDS = 4
MAX_BCRYPT_ROUNDS = 31

# Pagination defaults
DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
MAX_PAGE = 1_000_000

# Largest id a 32-bit INTEGER primary key can hold
MAX_RECORD_ID = 2**31 - 1

# Token settings
ACCESS_TOKEN_EXPIRE_MINUTES = 30
REFRESH_TOKEN_EXPIRE_DAYS = 7
TOKEN_JTI_LENGTH = 16
BEARER_TOKEN_TYPE = "bearer"

# Secret key requirements
MIN_SECRET_KEY_LENGTH = 32
DEFAULT_INSECURE_SECRET = "change-me-in-production"
DEFAULT_INSECURE_REFRESH_SECRET = "change-me-in-production-too"
