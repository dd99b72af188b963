from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from config.database import get_db
from core.dependencies import get_current_admin
from schemas.auth import Principal
from schemas.dashboard import DashboardStats, AdminNoteUpdate, AdminNoteResponse
from services.dashboard_service import DashboardService, get_dashboard_service

router = APIRouter()


@router.get("/stats", response_model=DashboardStats)
def get_dashboard_stats(
    db: Session = Depends(get_db),
    admin: Principal = Depends(get_current_admin),
    dashboard_service: DashboardService = Depends(get_dashboard_service)
):
    """Totals, revenue and payment/renewal rates"""
    return dashboard_service.get_stats(db)


@router.get("/notes", response_model=AdminNoteResponse)
def get_admin_notes(
    db: Session = Depends(get_db),
    admin: Principal = Depends(get_current_admin),
    dashboard_service: DashboardService = Depends(get_dashboard_service)
):
    return dashboard_service.get_notes(db)


@router.put("/notes", response_model=AdminNoteResponse)
def save_admin_notes(
    note: AdminNoteUpdate,
    db: Session = Depends(get_db),
    admin: Principal = Depends(get_current_admin),
    dashboard_service: DashboardService = Depends(get_dashboard_service)
):
    return dashboard_service.save_notes(db, note.note_content)
