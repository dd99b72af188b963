from sqlalchemy.orm import Session

from config.logging import get_logger
from repositories.customer_repo import CustomerRepository
from repositories.admin_note_repo import AdminNoteRepository
from schemas.dashboard import DashboardStats, AdminNoteResponse
from config.database import transaction

logger = get_logger(__name__)


def _percentage(part: int, whole: int) -> int:
    return round(part / whole * 100) if whole > 0 else 0


class DashboardService:
    def __init__(self):
        self.customer_repo = CustomerRepository()
        self.note_repo = AdminNoteRepository()

    def get_stats(self, db: Session) -> DashboardStats:
        """Headline figures for the admin dashboard"""
        totals = self.customer_repo.get_statistics(db)

        return DashboardStats(
            total_customers=totals["total"],
            paid_customers=totals["paid"],
            renewed_customers=totals["renewed"],
            total_revenue=totals["revenue"],
            payment_rate=_percentage(totals["paid"], totals["total"]),
            renewal_rate=_percentage(totals["renewed"], totals["total"])
        )

    def get_notes(self, db: Session) -> AdminNoteResponse:
        note = self.note_repo.get_latest(db)
        if note is None:
            return AdminNoteResponse(note_content="")
        return AdminNoteResponse.model_validate(note)

    def save_notes(self, db: Session, content: str) -> AdminNoteResponse:
        """Overwrite the notes pad, creating it on first save"""
        note = self.note_repo.get_latest(db)
        with transaction(db, "admin notes save"):
            if note is None:
                note = self.note_repo.create(db, obj_in={"note_content": content})
            else:
                note = self.note_repo.update(db, db_obj=note, obj_in={"note_content": content})
        logger.info("Admin notes saved")
        return AdminNoteResponse.model_validate(note)


def get_dashboard_service() -> DashboardService:
    return DashboardService()
