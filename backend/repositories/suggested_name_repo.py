from typing import Dict, Iterable, Optional
from sqlalchemy.orm import Session

from models.suggested_name import SuggestedName
from repositories.base import CRUDBase
from schemas.dashboard import SuggestedNameUpdate


class SuggestedNameRepository(CRUDBase[SuggestedName, SuggestedNameUpdate, SuggestedNameUpdate]):
    def __init__(self):
        super().__init__(SuggestedName)

    def get_by_mobile_number(self, db: Session, mobile_number: str) -> Optional[SuggestedName]:
        return self.get_by_field(db, "mobile_number", mobile_number)

    def upsert(self, db: Session, *, mobile_number: str, suggested_name: str) -> SuggestedName:
        """Create the suggestion for a number, or replace the existing one"""
        existing = self.get_by_mobile_number(db, mobile_number)
        if existing:
            return self.update(db, db_obj=existing, obj_in={"suggested_name": suggested_name})
        return self.create(db, obj_in={"mobile_number": mobile_number, "suggested_name": suggested_name})

    def lookup(self, db: Session, mobile_numbers: Iterable[str]) -> Dict[str, str]:
        """Map of mobile number to suggested name for the given numbers"""
        numbers = list({str(number) for number in mobile_numbers})
        if not numbers:
            return {}
        rows = db.query(self.model).filter(self.model.mobile_number.in_(numbers)).all()
        return {row.mobile_number: row.suggested_name for row in rows}
