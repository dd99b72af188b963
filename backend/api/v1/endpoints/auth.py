# api/v1/endpoints/auth.py
from fastapi import APIRouter, Depends, Request

from core.dependencies import get_current_principal, get_client_ip
from schemas.auth import LoginRequest, Principal, Token
from services.auth_service import AuthService, get_auth_service

router = APIRouter()


@router.post("/login", response_model=Token)
def login(
    login_data: LoginRequest,
    request: Request,
    auth_service: AuthService = Depends(get_auth_service)
):
    """Authenticate and return a bearer token"""
    principal = auth_service.authenticate(login_data, ip_address=get_client_ip(request))
    return auth_service.issue_token(principal)


@router.post("/refresh", response_model=Token)
def refresh_token(
    principal: Principal = Depends(get_current_principal),
    auth_service: AuthService = Depends(get_auth_service)
):
    """New token for the current session; resets the idle timer"""
    return auth_service.refresh(principal)


@router.get("/me", response_model=Principal)
def read_current_principal(principal: Principal = Depends(get_current_principal)):
    """Get the current caller"""
    return principal
