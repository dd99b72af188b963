# backend/core/security.py
import re
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
import jwt
from passlib.context import CryptContext

from config.settings import get_settings
from config.logging import get_logger, log_security_event
from core.exceptions import InvalidMobileNumberError

logger = get_logger(__name__)
settings = get_settings()

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Security constants
ALGORITHM = settings.JWT_ALGORITHM
SECRET_KEY = settings.JWT_SECRET_KEY

# Password security
def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError) as e:
        logger.error(f"Password verification error: {e}")
        return False

def get_password_hash(password: str) -> str:
    """Generate password hash."""
    return pwd_context.hash(password)

# Mobile numbers
MOBILE_NUMBER_PATTERN = re.compile(r"[0-9]+")

def normalize_mobile_number(value: str) -> str:
    """
    Canonical text form of a mobile number used as a login or lookup key:
    ASCII digits only, leading zeros dropped so "01012345678" and
    "1012345678" name the same line.
    """
    if value is None or not MOBILE_NUMBER_PATTERN.fullmatch(value):
        raise InvalidMobileNumberError(value)
    return str(int(value))

# JWT Token handling
def create_access_token(data: Dict[str, Any], expires_delta: timedelta) -> str:
    """Create JWT access token."""
    to_encode = data.copy()
    now = datetime.now(timezone.utc)

    to_encode.update({
        "exp": now + expires_delta,
        "iat": now,
        "type": "access"
    })

    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)

def verify_token(token: str) -> Optional[Dict[str, Any]]:
    """Verify and decode JWT token."""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError:
        log_security_event(SecurityEvent.TOKEN_EXPIRED, details="JWT token has expired")
        return None
    except jwt.InvalidTokenError as e:
        log_security_event(SecurityEvent.INVALID_TOKEN, details=f"Invalid JWT token: {str(e)}")
        return None

    if payload.get("type") != "access":
        log_security_event(SecurityEvent.INVALID_TOKEN, details="Unexpected token type")
        return None
    return payload

# Security event types
class SecurityEvent:
    LOGIN_SUCCESS = "LOGIN_SUCCESS"
    LOGIN_FAILURE = "LOGIN_FAILURE"
    TOKEN_REFRESH = "TOKEN_REFRESH"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    INVALID_TOKEN = "INVALID_TOKEN"
    UNAUTHORIZED_ACCESS = "UNAUTHORIZED_ACCESS"
    CREDENTIALS_RELOADED = "CREDENTIALS_RELOADED"

# Export security functions
__all__ = [
    "verify_password",
    "get_password_hash",
    "create_access_token",
    "verify_token",
    "SecurityEvent",
]
