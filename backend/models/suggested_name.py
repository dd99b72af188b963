"""
Display name a single-line user suggests for their own mobile number.
"""
from sqlalchemy import Column, String

from .base import BaseModel


class SuggestedName(BaseModel):
    __tablename__ = 'suggested_names'

    mobile_number = Column(String(20), unique=True, nullable=False, index=True)
    suggested_name = Column(String(255), nullable=False)

    def __repr__(self):
        return f"<SuggestedName(mobile={self.mobile_number}, name='{self.suggested_name}')>"
