from .base import BaseModel
from .customer import Customer
from .suggested_name import SuggestedName
from .admin_note import AdminNote

__all__ = ["BaseModel", "Customer", "SuggestedName", "AdminNote"]
