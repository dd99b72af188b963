# backend/core/dependencies.py
from fastapi import Depends, Query, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Optional

from config.settings import get_settings
from config.logging import get_logger, log_security_event
from core.exceptions import UnauthorizedError, ForbiddenError
from core.security import SecurityEvent
from schemas.auth import Principal, UserType
from services.auth_service import AuthService, get_auth_service

logger = get_logger(__name__)
settings = get_settings()
security = HTTPBearer(auto_error=False)


def get_client_ip(request: Request) -> str:
    """Get client IP address."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


# Authentication dependencies
def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> Principal:
    """Get the authenticated caller from the bearer token."""
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError()
    return auth_service.principal_from_token(credentials.credentials)


def get_current_admin(
    request: Request,
    principal: Principal = Depends(get_current_principal)
) -> Principal:
    """Ensure the caller is the admin."""
    if not principal.is_admin:
        log_security_event(
            SecurityEvent.UNAUTHORIZED_ACCESS,
            user=principal.username,
            details=f"{request.method} {request.url.path}",
            ip_address=get_client_ip(request)
        )
        raise ForbiddenError("Admin access required")
    return principal


def require_user_types(*user_types: UserType):
    """Allow only the given account types."""
    def user_type_checker(request: Request, principal: Principal = Depends(get_current_principal)) -> Principal:
        if principal.user_type not in user_types:
            log_security_event(
                SecurityEvent.UNAUTHORIZED_ACCESS,
                user=principal.username,
                details=f"{request.method} {request.url.path}",
                ip_address=get_client_ip(request)
            )
            raise ForbiddenError(
                f"Available to {', '.join(t.value for t in user_types)} accounts only"
            )
        return principal
    return user_type_checker


# Pagination dependency
class PaginationParams:
    def __init__(
        self,
        skip: int = Query(0, ge=0, description="Records to skip"),
        limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, description="Page size")
    ):
        self.skip = skip
        self.limit = min(limit, settings.MAX_PAGE_SIZE)
