import secrets
import string
from typing import Optional

from backpack.core.config import settings

REFERRAL_CODE_ALPHABET = string.ascii_uppercase + string.digits
REFERRAL_CODE_LENGTH = 6


def generate_referral_code(prefix: Optional[str] = None) -> str:
    """Generate a shareable referral code, e.g. BP-7K2QXA.

    Uniqueness is left to the locals.referral_code constraint.
    """
    if prefix is None:
        prefix = settings.REFERRAL_CODE_PREFIX
    suffix = "".join(secrets.choice(REFERRAL_CODE_ALPHABET) for _ in range(REFERRAL_CODE_LENGTH))
    return f"{prefix}{suffix}"


def verify_admin_credentials(username: Optional[str], password: Optional[str]) -> bool:
    """Compare against the configured admin pair in constant time"""
    if not username or not password:
        return False
    username_ok = secrets.compare_digest(username.encode(), settings.ADMIN_USERNAME.encode())
    password_ok = secrets.compare_digest(password.encode(), settings.ADMIN_PASSWORD.encode())
    return username_ok and password_ok
