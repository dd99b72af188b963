from typing import List, Optional, Dict, Any
from sqlalchemy.orm import Session
from sqlalchemy import or_, func, case, cast, String

from config.settings import settings
from models.customer import Customer
from repositories.base import CRUDBase, paginate
from schemas.customer import CustomerCreate, CustomerUpdate


class CustomerRepository(CRUDBase[Customer, CustomerCreate, CustomerUpdate]):
    def __init__(self):
        super().__init__(Customer)

    def _admin_order(self, query):
        return query.order_by(
            self.model.line_type.asc(),
            self.model.customer_name.asc(),
            self.model.charging_date.asc()
        )

    def list_ordered(
        self,
        db: Session,
        *,
        search_term: Optional[str] = None,
        skip: int = 0,
        limit: int = 100
    ) -> Dict[str, Any]:
        """
        Admin listing ordered by line type, customer name and charging date.
        ``search_term`` matches a name substring (case-insensitive) or a
        mobile number substring.
        """
        query = db.query(self.model)

        if search_term:
            term = search_term.strip()
            if term:
                query = query.filter(or_(
                    self.model.customer_name.ilike(f"%{term}%"),
                    cast(self.model.mobile_number, String).like(f"%{term}%")
                ))

        total = query.count()
        items = self._admin_order(query).offset(skip).limit(limit).all()
        return paginate(items, total, skip, limit)

    def get_by_mobile_number(self, db: Session, mobile_number: int) -> List[Customer]:
        """All lines registered to a mobile number"""
        return (
            db.query(self.model)
            .filter(self.model.mobile_number == mobile_number)
            .order_by(self.model.line_type.asc())
            .all()
        )

    def get_by_customer_name(self, db: Session, customer_name: str) -> List[Customer]:
        """Lines held under an exact customer name, newest charging date first"""
        return (
            db.query(self.model)
            .filter(self.model.customer_name == customer_name)
            .order_by(self.model.charging_date.desc(), self.model.line_type.asc())
            .all()
        )

    def get_statistics(self, db: Session) -> Dict[str, Any]:
        """Totals used by the admin dashboard, computed in one query"""
        paid = case((self.model.payment_status.in_(settings.PAID_STATUSES), 1), else_=0)
        renewed = case((self.model.renewal_status.in_(settings.RENEWED_STATUSES), 1), else_=0)

        row = db.query(
            func.count(self.model.id).label('total'),
            func.coalesce(func.sum(paid), 0).label('paid'),
            func.coalesce(func.sum(renewed), 0).label('renewed'),
            func.coalesce(func.sum(self.model.monthly_price), 0).label('revenue')
        ).one()

        return {
            "total": int(row.total or 0),
            "paid": int(row.paid or 0),
            "renewed": int(row.renewed or 0),
            "revenue": float(row.revenue or 0)
        }
