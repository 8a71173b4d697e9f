"""Audit transaction model."""
from datetime import datetime

from pydantic import BaseModel


class Transaction(BaseModel):
    """Record of one invoked operation."""

    user: str
    method: str
    args: str
    timestamp: datetime
