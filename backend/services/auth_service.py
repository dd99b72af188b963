import json
import os
from datetime import timedelta
from functools import lru_cache
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ValidationError as PydanticValidationError

from config.settings import settings
from config.logging import get_logger, log_security_event
from core.exceptions import UnauthorizedError, InvalidMobileNumberError
from core.security import (
    verify_password, create_access_token, verify_token, normalize_mobile_number, SecurityEvent
)
from schemas.auth import LoginRequest, Principal, Token, UserType

logger = get_logger(__name__)


class CredentialEntry(BaseModel):
    user_type: UserType
    username: str
    password_hash: str
    display_name: str


class CredentialStore:
    """
    Allow-list of password-protected accounts read from a JSON file::

        {"users": [{"user_type": "admin", "username": "...",
                    "password_hash": "<bcrypt>", "display_name": "Admin"}]}

    The file is re-read whenever its modification time changes, so
    credentials can be rotated without a restart.
    """

    def __init__(self, path: Optional[str] = None):
        self.path = path or settings.CREDENTIALS_FILE
        self._entries: Dict[Tuple[UserType, str], CredentialEntry] = {}
        self._mtime: Optional[float] = None
        self._missing = False

    def _load(self) -> List[CredentialEntry]:
        with open(self.path, encoding="utf-8") as fh:
            raw = json.load(fh)
        users = raw.get("users", []) if isinstance(raw, dict) else raw
        return [CredentialEntry.model_validate(user) for user in users]

    def reload(self) -> int:
        """Read the credentials file again; returns the number of accounts loaded."""
        try:
            mtime = os.path.getmtime(self.path)
        except OSError:
            if self._missing:
                logger.debug(f"Credentials file still missing: {self.path}")
            else:
                logger.error(f"Credentials file not found: {self.path}")
            self._entries, self._mtime, self._missing = {}, None, True
            return 0

        try:
            entries = self._load()
        except (OSError, ValueError, PydanticValidationError) as e:
            # keep serving the last good copy
            logger.error(f"Could not read credentials file {self.path}: {e}")
            return len(self._entries)

        self._entries = {(entry.user_type, entry.username): entry for entry in entries}
        self._mtime, self._missing = mtime, False
        log_security_event(SecurityEvent.CREDENTIALS_RELOADED, details=f"{len(entries)} accounts from {self.path}")
        return len(entries)

    def _refresh_if_changed(self):
        try:
            mtime = os.path.getmtime(self.path)
        except OSError:
            mtime = None
        if mtime is None or mtime != self._mtime:
            self.reload()

    def find(self, user_type: UserType, username: str) -> Optional[CredentialEntry]:
        self._refresh_if_changed()
        return self._entries.get((user_type, username))


@lru_cache()
def get_credential_store() -> CredentialStore:
    return CredentialStore()


class AuthService:
    def __init__(self, store: Optional[CredentialStore] = None):
        self.store = store or get_credential_store()

    def authenticate(self, login: LoginRequest, ip_address: Optional[str] = None) -> Principal:
        """
        Check a login attempt. Admin and reseller accounts need a password
        matching the stored bcrypt hash; single-line users sign in with
        their mobile number alone.
        """
        if login.user_type == UserType.SINGLE:
            try:
                mobile_number = normalize_mobile_number(login.username)
            except InvalidMobileNumberError:
                log_security_event(SecurityEvent.LOGIN_FAILURE, user=login.username,
                                   details="non-numeric mobile number", ip_address=ip_address)
                raise
            principal = Principal(user_type=UserType.SINGLE, username=mobile_number,
                                  display_name=mobile_number)
        else:
            entry = self.store.find(login.user_type, login.username)
            if entry is None or not login.password or not verify_password(login.password, entry.password_hash):
                log_security_event(SecurityEvent.LOGIN_FAILURE, user=login.username,
                                   details=f"user_type={login.user_type.value}", ip_address=ip_address)
                raise UnauthorizedError("Invalid username or password")
            principal = Principal(user_type=entry.user_type, username=entry.username,
                                  display_name=entry.display_name)

        log_security_event(SecurityEvent.LOGIN_SUCCESS, user=principal.username,
                           details=f"user_type={principal.user_type.value}", ip_address=ip_address)
        return principal

    def token_lifetime(self, principal: Principal) -> timedelta:
        """Admins get a long session; everyone else is logged out after the idle window."""
        if principal.is_admin:
            return timedelta(minutes=settings.ADMIN_TOKEN_EXPIRE_MINUTES)
        return timedelta(minutes=settings.SESSION_IDLE_MINUTES)

    def issue_token(self, principal: Principal) -> Token:
        lifetime = self.token_lifetime(principal)
        access_token = create_access_token(
            data={
                "sub": principal.username,
                "user_type": principal.user_type.value,
                "name": principal.display_name
            },
            expires_delta=lifetime
        )
        return Token(
            access_token=access_token,
            expires_in=int(lifetime.total_seconds()),
            user_type=principal.user_type,
            display_name=principal.display_name
        )

    def refresh(self, principal: Principal) -> Token:
        """New token for an active session, restarting the idle timer"""
        log_security_event(SecurityEvent.TOKEN_REFRESH, user=principal.username)
        return self.issue_token(principal)

    def principal_from_token(self, token: str) -> Principal:
        payload = verify_token(token)
        if payload is None:
            raise UnauthorizedError("Invalid or expired token")

        try:
            return Principal(
                user_type=payload.get("user_type"),
                username=payload.get("sub"),
                display_name=payload.get("name") or payload.get("sub")
            )
        except PydanticValidationError:
            log_security_event(SecurityEvent.INVALID_TOKEN, details="Malformed token claims")
            raise UnauthorizedError("Invalid token claims")


def get_auth_service() -> AuthService:
    return AuthService()
