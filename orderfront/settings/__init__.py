# orderfront/settings/__init__.py
"""
Django settings package for the order front-end.

- development: local development with debug enabled (default)
- production: hardened settings, secret key and hosts required

The ENVIRONMENT variable selects which module is loaded.
"""

import os
import warnings
from urllib.parse import urlparse

ENVIRONMENT = os.getenv("ENVIRONMENT", "development").lower()

VALID_ENVIRONMENTS = ["development", "production"]
if ENVIRONMENT not in VALID_ENVIRONMENTS:
    raise ValueError(
        f"Invalid ENVIRONMENT '{ENVIRONMENT}'. "
        f"Must be one of: {', '.join(VALID_ENVIRONMENTS)}"
    )

if ENVIRONMENT == "production":
    from .production import *  # noqa: F401,F403
else:
    from .development import *  # noqa: F401,F403


def validate_settings():
    """Validate critical settings are properly configured."""
    errors = []

    if not SECRET_KEY or SECRET_KEY == "your-secret-key-here":
        errors.append("SECRET_KEY must be set to a secure random value")

    for name in ("BACKEND_URL", "PUSH_URL"):
        parsed = urlparse(globals()[name])
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            errors.append(f"{name} must be an absolute http(s) URL, got {globals()[name]!r}")

    if ENVIRONMENT == "production" and not ALLOWED_HOSTS:
        errors.append("ALLOWED_HOSTS must be configured for production")

    if ENVIRONMENT == "production" and DEBUG:
        errors.append("DEBUG should be False in production")

    if errors:
        error_msg = "\n".join([f"  - {error}" for error in errors])
        raise ValueError(f"Settings validation failed:\n{error_msg}")


try:
    validate_settings()
except ValueError as e:
    if ENVIRONMENT == "production":
        raise
    warnings.warn(str(e), RuntimeWarning, stacklevel=2)
