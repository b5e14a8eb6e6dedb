# finance_tracker/api/routes/categories.py
from fastapi import APIRouter, Depends, Query, status
from typing import List
import uuid

from finance_tracker.schemas.category import CategoryIn, CategoryRead
from finance_tracker.schemas.transaction import TransactionRead
from finance_tracker.services.category_service import CategoryService
from finance_tracker.services.errors import LifecycleError
from finance_tracker.api.deps import get_current_user_id, get_category_service, raise_for_error

router = APIRouter(prefix="/category", tags=["categories"])

NOT_FOUND = "Category not found"

@router.get("", response_model=List[CategoryRead])
async def read_categories(
    sort_by: str = Query("name", alias="sortBy"),
    sort_order: str = Query("asc", alias="sortOrder"),
    service: CategoryService = Depends(get_category_service),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    return await service.list_categories(user_id, sort_by, sort_order)

@router.get("/{category_id}/transactions", response_model=List[TransactionRead])
async def read_category_transactions(
    category_id: int,
    skip: int = Query(0, ge=0),
    take: int = Query(50),
    service: CategoryService = Depends(get_category_service),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    """Page through a category's transactions, oldest first. ``take`` is clamped to 1..200."""
    transactions, error = await service.list_category_transactions(category_id, user_id, skip, take)
    if error:
        raise_for_error(error, NOT_FOUND)
    return transactions

@router.get("/{category_id}", response_model=CategoryRead)
async def read_category(
    category_id: int,
    service: CategoryService = Depends(get_category_service),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    category = await service.get_category(category_id, user_id)
    if category is None:
        raise_for_error(LifecycleError.not_found, NOT_FOUND)
    return category

@router.post("", response_model=CategoryRead, status_code=status.HTTP_201_CREATED)
async def create_category(
    cat_in: CategoryIn,
    service: CategoryService = Depends(get_category_service),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    return await service.create_category(user_id, cat_in)

@router.put("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_category(
    category_id: int,
    cat_in: CategoryIn,
    service: CategoryService = Depends(get_category_service),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    _, error = await service.update_category(category_id, user_id, cat_in)
    if error:
        raise_for_error(error, NOT_FOUND)
    return None

@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: int,
    service: CategoryService = Depends(get_category_service),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    _, error = await service.delete_category(category_id, user_id)
    if error:
        raise_for_error(error, NOT_FOUND)
    return None
