# finance_tracker/schemas/transaction.py
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime, timezone

from finance_tracker.models.transaction import TransactionType


def to_utc(value: datetime) -> datetime:
    """Naive timestamps are taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class TransactionIn(BaseModel):
    amount: Decimal = Field(..., max_digits=18, decimal_places=2)
    date: datetime = Field(..., description="ISO 8601 date/time of transaction")
    type: TransactionType
    # 0 means "not set"; on create it resolves to the default category
    category_id: int = Field(0, ge=0)

class TransactionRead(BaseModel):
    id: int
    amount: Decimal
    date: datetime
    type: TransactionType
    category_id: int
    category_name: str

    model_config = ConfigDict(from_attributes=True)

    # SQLite hands back naive values
    @field_validator("date")
    @classmethod
    def date_in_utc(cls, value: datetime) -> datetime:
        return to_utc(value)
