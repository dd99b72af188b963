from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from config.database import get_db
from core.dependencies import require_user_types
from schemas.auth import Principal, UserType
from schemas.customer import CustomerPublic
from schemas.dashboard import SuggestedNameUpdate, SuggestedNameResponse
from services.customer_service import CustomerService, get_customer_service
from services.suggested_name_service import SuggestedNameService, get_suggested_name_service

router = APIRouter()


@router.get("/lines", response_model=List[CustomerPublic])
def get_my_lines(
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_user_types(UserType.MULTIPLE, UserType.SINGLE)),
    customer_service: CustomerService = Depends(get_customer_service)
):
    """
    Lines visible to the caller. Resellers get the lines held under their
    name, newest charging date first; single-line users get the lines of
    their mobile number. Admin notes are never included.
    """
    return customer_service.lines_for_principal(db, principal)


@router.get("/suggested-name", response_model=SuggestedNameResponse)
def get_my_suggested_name(
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_user_types(UserType.SINGLE)),
    suggested_name_service: SuggestedNameService = Depends(get_suggested_name_service)
):
    return suggested_name_service.get_for_principal(db, principal)


@router.put("/suggested-name", response_model=SuggestedNameResponse)
def set_my_suggested_name(
    suggestion: SuggestedNameUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_user_types(UserType.SINGLE)),
    suggested_name_service: SuggestedNameService = Depends(get_suggested_name_service)
):
    """Suggest a display name for the caller's own mobile number"""
    return suggested_name_service.suggest(db, principal, suggestion.suggested_name)
