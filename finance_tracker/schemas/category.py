# finance_tracker/schemas/category.py
from pydantic import BaseModel, ConfigDict, Field, field_validator

from finance_tracker.models.category import CategoryType, DEFAULT_CATEGORY_NAME

class CategoryIn(BaseModel):
    """Body of POST /api/category and PUT /api/category/{id}."""
    name: str = Field(..., min_length=1, max_length=50)
    type: CategoryType

    @field_validator("name")
    @classmethod
    def name_is_not_reserved(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Category name must not be blank")
        if value.upper() == DEFAULT_CATEGORY_NAME:
            raise ValueError(f"'{DEFAULT_CATEGORY_NAME}' is a reserved category name")
        return value

class CategoryRead(BaseModel):
    id: int
    name: str
    type: CategoryType
    transaction_count: int = 0

    model_config = ConfigDict(from_attributes=True)
