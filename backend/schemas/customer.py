from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Optional, List, Union
from datetime import date, datetime
from decimal import Decimal

from config.settings import settings


def _check_line_type(value: Optional[int]) -> Optional[int]:
    if value is not None and value not in settings.ALLOWED_LINE_TYPES:
        raise ValueError(f"line_type must be one of {settings.ALLOWED_LINE_TYPES}")
    return value

def _clean_provider(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip().lower()
    if not value:
        return None
    if value not in settings.ALLOWED_PROVIDERS:
        raise ValueError(f"provider must be one of {settings.ALLOWED_PROVIDERS}")
    return value

def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value.strip() if isinstance(value, str) else value


class CustomerBase(BaseModel):
    customer_name: str = Field(..., min_length=1, max_length=255)
    mobile_number: int = Field(..., gt=0)
    line_type: int = Field(default=settings.DEFAULT_LINE_TYPE)
    charging_date: Optional[str] = Field(None, max_length=50)
    arrival_time: Optional[str] = Field(None, max_length=50)
    renewal_date: Optional[str] = Field(None, max_length=50)
    provider: Optional[str] = Field(None, max_length=50)
    ownership: Optional[str] = Field(None, max_length=100)
    payment_status: str = Field(default=settings.DEFAULT_PAYMENT_STATUS, max_length=50)
    renewal_status: str = Field(default=settings.DEFAULT_RENEWAL_STATUS, max_length=50)
    monthly_price: Optional[Decimal] = Field(None, ge=0)

    @field_validator('customer_name')
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('customer_name must not be blank')
        return v

    @field_validator('line_type')
    @classmethod
    def validate_line_type(cls, v):
        return _check_line_type(v)

    @field_validator('provider')
    @classmethod
    def validate_provider(cls, v):
        return _clean_provider(v)

    @field_validator('charging_date', 'arrival_time', 'renewal_date', 'ownership', mode='before')
    @classmethod
    def blank_strings_are_missing(cls, v):
        return _blank_to_none(v)


class CustomerCreate(CustomerBase):
    notes: Optional[str] = None


class CustomerUpdate(BaseModel):
    """Partial update: only the fields present in the request are written."""
    customer_name: Optional[str] = Field(None, min_length=1, max_length=255)
    mobile_number: Optional[int] = Field(None, gt=0)
    line_type: Optional[int] = None
    charging_date: Optional[str] = Field(None, max_length=50)
    arrival_time: Optional[str] = Field(None, max_length=50)
    renewal_date: Optional[str] = Field(None, max_length=50)
    provider: Optional[str] = Field(None, max_length=50)
    ownership: Optional[str] = Field(None, max_length=100)
    payment_status: Optional[str] = Field(None, max_length=50)
    renewal_status: Optional[str] = Field(None, max_length=50)
    monthly_price: Optional[Decimal] = Field(None, ge=0)
    notes: Optional[str] = None

    @field_validator('customer_name', 'mobile_number', 'line_type', 'payment_status', 'renewal_status')
    @classmethod
    def required_columns_not_null(cls, v, info):
        # omitted is fine, explicit null is not
        if v is None:
            raise ValueError(f'{info.field_name} cannot be null')
        if isinstance(v, str):
            v = v.strip()
            if not v:
                raise ValueError(f'{info.field_name} must not be blank')
        return v

    @field_validator('line_type')
    @classmethod
    def validate_line_type(cls, v):
        return _check_line_type(v)

    @field_validator('provider')
    @classmethod
    def validate_provider(cls, v):
        return _clean_provider(v)

    @field_validator('charging_date', 'arrival_time', 'renewal_date', 'ownership', mode='before')
    @classmethod
    def blank_strings_are_missing(cls, v):
        return _blank_to_none(v)


class NotesUpdate(BaseModel):
    notes: Optional[str] = None


class BulkCustomerRow(BaseModel):
    """One row of a bulk insert; rows without a name or mobile number are skipped."""
    customer_name: Optional[str] = Field(None, max_length=255)
    mobile_number: Optional[int] = Field(None, gt=0)
    line_type: int = Field(default=settings.DEFAULT_LINE_TYPE)
    charging_date: Optional[str] = Field(None, max_length=50)
    arrival_time: Optional[str] = Field(None, max_length=50)
    provider: Optional[str] = Field(None, max_length=50)
    ownership: Optional[str] = Field(None, max_length=100)
    payment_status: str = Field(default=settings.DEFAULT_PAYMENT_STATUS, max_length=50)
    renewal_status: str = Field(default=settings.DEFAULT_RENEWAL_STATUS, max_length=50)
    monthly_price: Optional[Decimal] = Field(None, ge=0)

    @field_validator('customer_name', 'charging_date', 'arrival_time', 'ownership', mode='before')
    @classmethod
    def blank_strings_are_missing(cls, v):
        return _blank_to_none(v)

    @field_validator('mobile_number', mode='before')
    @classmethod
    def blank_mobile_is_missing(cls, v):
        return _blank_to_none(v)

    @field_validator('line_type')
    @classmethod
    def validate_line_type(cls, v):
        return _check_line_type(v)

    @field_validator('provider')
    @classmethod
    def validate_provider(cls, v):
        return _clean_provider(v)

    @property
    def is_complete(self) -> bool:
        return bool(self.customer_name) and self.mobile_number is not None


class CustomerBulkCreate(BaseModel):
    customers: List[BulkCustomerRow]


class BulkEditChanges(BaseModel):
    """
    Field changes for a bulk edit. Select-style fields default to the
    no-change sentinel and free-text fields default to empty; both mean
    "leave this field alone".
    """
    model_config = ConfigDict(validate_default=True)

    line_type: Union[int, str, None] = settings.NO_CHANGE_SENTINEL
    charging_date: Optional[str] = ""
    arrival_time: Optional[str] = ""
    renewal_date: Optional[str] = ""
    provider: Optional[str] = settings.NO_CHANGE_SENTINEL
    ownership: Optional[str] = settings.NO_CHANGE_SENTINEL
    payment_status: Optional[str] = settings.NO_CHANGE_SENTINEL
    renewal_status: Optional[str] = settings.NO_CHANGE_SENTINEL
    monthly_price: Union[Decimal, str, None] = ""

    @field_validator('*', mode='before')
    @classmethod
    def sentinel_to_none(cls, v):
        if v is None:
            return None
        if isinstance(v, str):
            v = v.strip()
            if not v or v == settings.NO_CHANGE_SENTINEL:
                return None
        return v

    @field_validator('line_type')
    @classmethod
    def validate_line_type(cls, v):
        if v is None:
            return None
        try:
            v = int(v)
        except (TypeError, ValueError):
            raise ValueError('line_type must be an integer')
        return _check_line_type(v)

    @field_validator('provider')
    @classmethod
    def validate_provider(cls, v):
        return _clean_provider(v)

    @field_validator('monthly_price')
    @classmethod
    def validate_price(cls, v):
        if v is None:
            return None
        try:
            v = Decimal(str(v))
        except ArithmeticError:
            raise ValueError('monthly_price must be a number')
        if v < 0:
            raise ValueError('monthly_price must not be negative')
        return v

    def effective_changes(self) -> dict:
        """Only the fields that were explicitly set to a value."""
        return {field: value for field, value in self.model_dump().items() if value is not None}


class CustomerBulkEdit(BaseModel):
    ids: List[int] = Field(default_factory=list)
    changes: BulkEditChanges = Field(default_factory=BulkEditChanges)


class RenewalResponse(BaseModel):
    resolved_date: Optional[date] = None
    display: str
    specified: bool
    days_until_renewal: Optional[int] = None


class CustomerPublic(BaseModel):
    """Restricted view for resellers and single-line users: no admin notes."""
    id: int
    customer_name: str
    mobile_number: int
    line_type: int
    charging_date: Optional[str] = None
    charging_date_display: str
    arrival_time: Optional[str] = None
    arrival_time_display: str
    provider: Optional[str] = None
    ownership: Optional[str] = None
    payment_status: str
    renewal_status: str
    monthly_price: Optional[float] = None
    renewal: RenewalResponse


class CustomerResponse(CustomerPublic):
    """Admin view."""
    renewal_date: Optional[str] = None
    notes: Optional[str] = None
    suggested_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class BulkCreateResult(BaseModel):
    inserted: int
    skipped: int
    customers: List[CustomerResponse]


class BulkEditResult(BaseModel):
    updated: int
    fields: List[str]


class CustomerListResponse(BaseModel):
    items: List[CustomerResponse]
    total: int
    page: int
    pages: int
    per_page: int
    has_next: bool
    has_prev: bool
