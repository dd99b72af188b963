"""
Free-text notes pad shown on the admin dashboard.
"""
from sqlalchemy import Column, Text

from .base import BaseModel


class AdminNote(BaseModel):
    __tablename__ = 'admin_notes'

    note_content = Column(Text, nullable=False, default="")
