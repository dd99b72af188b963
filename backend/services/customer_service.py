import time
from datetime import date
from typing import List, Optional, Dict, Any, Tuple
from sqlalchemy.orm import Session

from config.settings import settings
from config.database import transaction
from config.logging import get_logger, log_database_operation
from core.exceptions import (
    NotFoundError, ForbiddenError,
    BulkLimitExceededError, EmptyBulkBatchError, NoCustomersSelectedError, NoFieldsToUpdateError
)
from core.security import normalize_mobile_number
from models.customer import Customer
from schemas.auth import Principal, UserType
from schemas.customer import (
    CustomerCreate, CustomerUpdate, CustomerBulkCreate, CustomerBulkEdit,
    CustomerPublic, CustomerResponse, RenewalResponse, BulkEditResult
)
from repositories.customer_repo import CustomerRepository
from repositories.suggested_name_repo import SuggestedNameRepository
from services.renewal_service import RenewalService, get_renewal_service
from utils.date_utils import format_date

logger = get_logger(__name__)


class CustomerService:
    def __init__(self, renewal_service: Optional[RenewalService] = None):
        self.customer_repo = CustomerRepository()
        self.suggested_name_repo = SuggestedNameRepository()
        self.renewal_service = renewal_service or get_renewal_service()

    # ------------------------------------------------------------------
    # Presentation
    # ------------------------------------------------------------------

    def _public_fields(self, customer: Customer, today: Optional[date] = None) -> Dict[str, Any]:
        renewal = self.renewal_service.describe(customer, today)
        return {
            "id": customer.id,
            "customer_name": customer.customer_name,
            "mobile_number": customer.mobile_number,
            "line_type": customer.line_type,
            "charging_date": customer.charging_date,
            "charging_date_display": format_date(customer.charging_date),
            "arrival_time": customer.arrival_time,
            "arrival_time_display": format_date(customer.arrival_time),
            "provider": customer.provider,
            "ownership": customer.ownership,
            "payment_status": customer.payment_status,
            "renewal_status": customer.renewal_status,
            "monthly_price": float(customer.monthly_price) if customer.monthly_price is not None else None,
            "renewal": RenewalResponse(
                resolved_date=renewal.renewal_date,
                display=renewal.display,
                specified=renewal.specified,
                days_until_renewal=renewal.days_until_renewal
            )
        }

    def to_public(self, customer: Customer, today: Optional[date] = None) -> CustomerPublic:
        """Restricted view without admin notes"""
        return CustomerPublic(**self._public_fields(customer, today))

    def to_response(
        self,
        customer: Customer,
        suggested_name: Optional[str] = None,
        today: Optional[date] = None
    ) -> CustomerResponse:
        """Full admin view"""
        return CustomerResponse(
            **self._public_fields(customer, today),
            renewal_date=customer.renewal_date,
            notes=customer.notes,
            suggested_name=suggested_name,
            created_at=customer.created_at,
            updated_at=customer.updated_at
        )

    def to_responses(self, db: Session, customers: List[Customer]) -> List[CustomerResponse]:
        """Admin views with suggested names looked up in one query"""
        suggestions = self.suggested_name_repo.lookup(db, (c.mobile_number for c in customers))
        today = self.renewal_service.today()
        return [
            self.to_response(c, suggestions.get(str(c.mobile_number)), today)
            for c in customers
        ]

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_customer(self, db: Session, customer_id: int) -> Customer:
        customer = self.customer_repo.get(db, customer_id)
        if not customer:
            raise NotFoundError("Customer", customer_id)
        return customer

    def list_customers(
        self,
        db: Session,
        search: Optional[str] = None,
        skip: int = 0,
        limit: int = 100
    ) -> Dict[str, Any]:
        """Admin listing ordered by line type, name and charging date"""
        page = self.customer_repo.list_ordered(db, search_term=search, skip=skip, limit=limit)
        page["items"] = self.to_responses(db, page["items"])
        return page

    def lines_for_principal(self, db: Session, principal: Principal) -> List[CustomerPublic]:
        """
        Lines visible to a non-admin user: a reseller sees every line held
        under their display name, a single-line user sees the lines of their
        mobile number.
        """
        if principal.user_type == UserType.MULTIPLE:
            customers = self.customer_repo.get_by_customer_name(db, principal.display_name)
        elif principal.user_type == UserType.SINGLE:
            mobile_number = normalize_mobile_number(principal.username)
            customers = self.customer_repo.get_by_mobile_number(db, int(mobile_number))
        else:
            raise ForbiddenError("The restricted view is for reseller and single-line accounts")

        today = self.renewal_service.today()
        return [self.to_public(c, today) for c in customers]

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_customer(self, db: Session, customer_data: CustomerCreate) -> Customer:
        with transaction(db, "customer create"):
            customer = self.customer_repo.create(db, obj_in=customer_data)
        logger.info(f"Created customer {customer.id} ({customer.mobile_number})")
        return customer

    def bulk_create(self, db: Session, batch: CustomerBulkCreate) -> Tuple[List[Customer], int]:
        """
        Insert up to BULK_INSERT_LIMIT rows. Rows without a name or mobile
        number are skipped; returns the created customers and the skip count.
        """
        limit = settings.BULK_INSERT_LIMIT
        if len(batch.customers) > limit:
            raise BulkLimitExceededError(len(batch.customers), limit)

        rows = [row for row in batch.customers if row.is_complete]
        if not rows:
            raise EmptyBulkBatchError()

        started = time.time()
        with transaction(db, "bulk customer create"):
            customers = self.customer_repo.create_bulk(db, objs_in=rows)
        log_database_operation("INSERT", "customers", time.time() - started, len(customers))

        skipped = len(batch.customers) - len(rows)
        logger.info(f"Bulk insert created {len(customers)} customers, skipped {skipped}")
        return customers, skipped

    def replace_customer(self, db: Session, customer_id: int, customer_data: CustomerCreate) -> Customer:
        """Admin edit: every editable field is written"""
        customer = self.get_customer(db, customer_id)
        with transaction(db, "customer edit"):
            customer = self.customer_repo.update(db, db_obj=customer, obj_in=customer_data.model_dump())
        return customer

    def update_customer(self, db: Session, customer_id: int, customer_data: CustomerUpdate) -> Customer:
        """Partial update: only the fields present in the request change"""
        customer = self.get_customer(db, customer_id)
        changes = customer_data.model_dump(exclude_unset=True)
        if not changes:
            raise NoFieldsToUpdateError()
        with transaction(db, "customer update"):
            customer = self.customer_repo.update(db, db_obj=customer, obj_in=changes)
        return customer

    def update_notes(self, db: Session, customer_id: int, notes: Optional[str]) -> Customer:
        customer = self.get_customer(db, customer_id)
        with transaction(db, "notes update"):
            customer = self.customer_repo.update(db, db_obj=customer, obj_in={"notes": notes})
        return customer

    def bulk_edit(self, db: Session, edit: CustomerBulkEdit) -> BulkEditResult:
        """Apply the explicitly set fields to every selected customer in one statement"""
        ids = sorted(set(edit.ids))
        if not ids:
            raise NoCustomersSelectedError()

        changes = edit.changes.effective_changes()
        if not changes:
            raise NoFieldsToUpdateError()

        started = time.time()
        with transaction(db, "bulk edit"):
            updated = self.customer_repo.update_many(db, ids=ids, values=changes)
        log_database_operation("UPDATE", "customers", time.time() - started, updated)

        logger.info(f"Bulk edit set {sorted(changes)} on {updated} of {len(ids)} customers")
        return BulkEditResult(updated=updated, fields=sorted(changes))

    def delete_customer(self, db: Session, customer_id: int) -> None:
        self.get_customer(db, customer_id)
        with transaction(db, "customer delete"):
            self.customer_repo.delete(db, id=customer_id)
        logger.info(f"Deleted customer {customer_id}")


def get_customer_service() -> CustomerService:
    return CustomerService()
