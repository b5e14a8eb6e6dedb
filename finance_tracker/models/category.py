# finance_tracker/models/category.py
import enum
from sqlalchemy import Column, String, ForeignKey, Boolean, Enum, Integer, Uuid
from finance_tracker.core.database import Base

# Reserved name of the per-user default category seeded at registration
DEFAULT_CATEGORY_NAME = "WITHOUT CATEGORY"

class CategoryType(str, enum.Enum):
    Income = "Income"
    Expense = "Expense"
    Neutral = "Neutral"

class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(length=50), nullable=False)
    type = Column(Enum(CategoryType, name="category_type", native_enum=False, length=16), nullable=False)
    is_default = Column(Boolean(), default=False, nullable=False)  # True only for WITHOUT CATEGORY

    def __repr__(self):
        return f"<Category name={self.name} type={self.type} user_id={self.user_id}>"


def is_default_category(category: Category) -> bool:
    return bool(category.is_default) or category.name == DEFAULT_CATEGORY_NAME
