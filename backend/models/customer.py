"""
Customer model: one row per mobile-data line.
"""
from sqlalchemy import Column, BigInteger, Integer, String, Text, Numeric, Index

from config.settings import settings
from .base import BaseModel


class Customer(BaseModel):
    """
    A mobile-data line held by a customer.

    Date columns are free-form text because rows arrive in several formats
    (ISO, YYYY/MM/DD, DD/MM/YYYY, "5-Aug"); they are normalized on read by
    ``utils.date_utils`` rather than on write.
    """
    __tablename__ = 'customers'

    customer_name = Column(String(255), nullable=False, index=True)
    mobile_number = Column(BigInteger, nullable=False, index=True)
    line_type = Column(Integer, nullable=False, default=settings.DEFAULT_LINE_TYPE)  # GB tier

    charging_date = Column(String(50), nullable=True)
    arrival_time = Column(String(50), nullable=True)
    renewal_date = Column(String(50), nullable=True)  # explicit override

    provider = Column(String(50), nullable=True)
    ownership = Column(String(100), nullable=True)

    payment_status = Column(String(50), nullable=False, default=settings.DEFAULT_PAYMENT_STATUS)
    renewal_status = Column(String(50), nullable=False, default=settings.DEFAULT_RENEWAL_STATUS)
    monthly_price = Column(Numeric(10, 2), nullable=True)

    notes = Column(Text, nullable=True)  # admin only

    __table_args__ = (
        Index('idx_customer_listing', 'line_type', 'customer_name', 'charging_date'),
    )

    @property
    def is_paid(self) -> bool:
        return self.payment_status in settings.PAID_STATUSES

    @property
    def is_renewed(self) -> bool:
        return self.renewal_status in settings.RENEWED_STATUSES

    def __repr__(self):
        return f"<Customer(id={self.id}, name='{self.customer_name}', mobile={self.mobile_number})>"
