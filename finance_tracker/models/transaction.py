# finance_tracker/models/transaction.py
import enum
from sqlalchemy import Column, ForeignKey, Numeric, DateTime, Enum, Integer, Uuid
from sqlalchemy.orm import relationship
from finance_tracker.core.database import Base
from finance_tracker.models.category import CategoryType

class TransactionType(str, enum.Enum):
    Income = "Income"
    Expense = "Expense"

class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Numeric(18, 2), nullable=False)
    # Always stored in UTC
    date = Column(DateTime(timezone=True), nullable=False)
    type = Column(Enum(TransactionType, name="transaction_type", native_enum=False, length=16), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)

    category = relationship("Category", lazy="joined")

    def __repr__(self):
        return f"<Transaction amount={self.amount} date={self.date} user_id={self.user_id}>"


def is_compatible(transaction_type: TransactionType, category_type: CategoryType) -> bool:
    """A Neutral category accepts anything; otherwise the types must match."""
    if category_type == CategoryType.Neutral:
        return True
    return (
        (transaction_type == TransactionType.Income and category_type == CategoryType.Income)
        or (transaction_type == TransactionType.Expense and category_type == CategoryType.Expense)
    )
