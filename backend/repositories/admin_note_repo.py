from typing import Optional
from sqlalchemy.orm import Session

from models.admin_note import AdminNote
from repositories.base import CRUDBase
from schemas.dashboard import AdminNoteUpdate


class AdminNoteRepository(CRUDBase[AdminNote, AdminNoteUpdate, AdminNoteUpdate]):
    def __init__(self):
        super().__init__(AdminNote)

    def get_latest(self, db: Session) -> Optional[AdminNote]:
        """The notes pad is the most recently written row"""
        return (
            db.query(self.model)
            .order_by(self.model.updated_at.desc(), self.model.id.desc())
            .first()
        )
