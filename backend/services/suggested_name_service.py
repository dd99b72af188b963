from sqlalchemy.orm import Session

from config.logging import get_logger
from core.exceptions import ForbiddenError
from core.security import normalize_mobile_number
from repositories.suggested_name_repo import SuggestedNameRepository
from schemas.auth import Principal, UserType
from schemas.dashboard import SuggestedNameResponse
from config.database import transaction

logger = get_logger(__name__)


class SuggestedNameService:
    """A single-line user may suggest how their line should be labelled."""

    def __init__(self):
        self.repo = SuggestedNameRepository()

    def _mobile_number_of(self, principal: Principal) -> str:
        if principal.user_type != UserType.SINGLE:
            raise ForbiddenError("Only single-line accounts can suggest a name")
        return normalize_mobile_number(principal.username)

    def get_for_principal(self, db: Session, principal: Principal) -> SuggestedNameResponse:
        mobile_number = self._mobile_number_of(principal)
        existing = self.repo.get_by_mobile_number(db, mobile_number)
        if existing is None:
            return SuggestedNameResponse(mobile_number=mobile_number)
        return SuggestedNameResponse.model_validate(existing)

    def suggest(self, db: Session, principal: Principal, suggested_name: str) -> SuggestedNameResponse:
        mobile_number = self._mobile_number_of(principal)
        with transaction(db, "suggested name save"):
            row = self.repo.upsert(db, mobile_number=mobile_number, suggested_name=suggested_name.strip())
        logger.info(f"Suggested name saved for {mobile_number}")
        return SuggestedNameResponse.model_validate(row)


def get_suggested_name_service() -> SuggestedNameService:
    return SuggestedNameService()
