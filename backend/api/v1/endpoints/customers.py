from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from config.database import get_db
from core.dependencies import get_current_admin, PaginationParams
from schemas.auth import Principal
from schemas.customer import (
    CustomerCreate,
    CustomerUpdate,
    CustomerResponse,
    CustomerListResponse,
    CustomerBulkCreate,
    CustomerBulkEdit,
    NotesUpdate,
    BulkCreateResult,
    BulkEditResult
)
from services.customer_service import CustomerService, get_customer_service

router = APIRouter()


@router.get("", response_model=CustomerListResponse)
def get_customers(
    search: Optional[str] = Query(None, description="Name or mobile number substring"),
    pagination: PaginationParams = Depends(),
    db: Session = Depends(get_db),
    admin: Principal = Depends(get_current_admin),
    customer_service: CustomerService = Depends(get_customer_service)
):
    """
    All lines ordered by line type, customer name and charging date, with
    the resolved renewal date and any suggested name.
    """
    return customer_service.list_customers(db, search=search, skip=pagination.skip, limit=pagination.limit)


@router.post("", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
def create_customer(
    customer_data: CustomerCreate,
    db: Session = Depends(get_db),
    admin: Principal = Depends(get_current_admin),
    customer_service: CustomerService = Depends(get_customer_service)
):
    customer = customer_service.create_customer(db, customer_data)
    return customer_service.to_responses(db, [customer])[0]


@router.post("/bulk", response_model=BulkCreateResult, status_code=status.HTTP_201_CREATED)
def bulk_create_customers(
    batch: CustomerBulkCreate,
    db: Session = Depends(get_db),
    admin: Principal = Depends(get_current_admin),
    customer_service: CustomerService = Depends(get_customer_service)
):
    """Insert up to 20 customers; incomplete rows are skipped"""
    customers, skipped = customer_service.bulk_create(db, batch)
    return BulkCreateResult(
        inserted=len(customers),
        skipped=skipped,
        customers=customer_service.to_responses(db, customers)
    )


@router.post("/bulk-edit", response_model=BulkEditResult)
def bulk_edit_customers(
    edit: CustomerBulkEdit,
    db: Session = Depends(get_db),
    admin: Principal = Depends(get_current_admin),
    customer_service: CustomerService = Depends(get_customer_service)
):
    """Apply the set fields of ``changes`` to every customer in ``ids``"""
    return customer_service.bulk_edit(db, edit)


@router.get("/{customer_id}", response_model=CustomerResponse)
def get_customer(
    customer_id: int,
    db: Session = Depends(get_db),
    admin: Principal = Depends(get_current_admin),
    customer_service: CustomerService = Depends(get_customer_service)
):
    customer = customer_service.get_customer(db, customer_id)
    return customer_service.to_responses(db, [customer])[0]


@router.put("/{customer_id}", response_model=CustomerResponse)
def replace_customer(
    customer_id: int,
    customer_data: CustomerCreate,
    db: Session = Depends(get_db),
    admin: Principal = Depends(get_current_admin),
    customer_service: CustomerService = Depends(get_customer_service)
):
    """Admin edit of every field"""
    customer = customer_service.replace_customer(db, customer_id, customer_data)
    return customer_service.to_responses(db, [customer])[0]


@router.patch("/{customer_id}", response_model=CustomerResponse)
def update_customer(
    customer_id: int,
    customer_data: CustomerUpdate,
    db: Session = Depends(get_db),
    admin: Principal = Depends(get_current_admin),
    customer_service: CustomerService = Depends(get_customer_service)
):
    """Partial update of the fields sent"""
    customer = customer_service.update_customer(db, customer_id, customer_data)
    return customer_service.to_responses(db, [customer])[0]


@router.put("/{customer_id}/notes", response_model=CustomerResponse)
def update_customer_notes(
    customer_id: int,
    notes_data: NotesUpdate,
    db: Session = Depends(get_db),
    admin: Principal = Depends(get_current_admin),
    customer_service: CustomerService = Depends(get_customer_service)
):
    customer = customer_service.update_notes(db, customer_id, notes_data.notes)
    return customer_service.to_responses(db, [customer])[0]


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_customer(
    customer_id: int,
    db: Session = Depends(get_db),
    admin: Principal = Depends(get_current_admin),
    customer_service: CustomerService = Depends(get_customer_service)
):
    customer_service.delete_customer(db, customer_id)
