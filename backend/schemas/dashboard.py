from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from datetime import datetime


class DashboardStats(BaseModel):
    total_customers: int
    paid_customers: int
    renewed_customers: int
    total_revenue: float
    payment_rate: int = Field(..., description="Paid customers as a rounded percentage")
    renewal_rate: int = Field(..., description="Renewed customers as a rounded percentage")


class AdminNoteUpdate(BaseModel):
    note_content: str = ""


class AdminNoteResponse(BaseModel):
    note_content: str
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class SuggestedNameUpdate(BaseModel):
    suggested_name: str = Field(..., min_length=1, max_length=255)

    @field_validator('suggested_name')
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('suggested_name must not be blank')
        return v


class SuggestedNameResponse(BaseModel):
    mobile_number: str
    suggested_name: Optional[str] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
