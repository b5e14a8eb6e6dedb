# finance_tracker/api/routes/transactions.py
from fastapi import APIRouter, Depends, Query, status
from typing import List
import uuid

from finance_tracker.schemas.transaction import TransactionIn, TransactionRead
from finance_tracker.services.errors import LifecycleError
from finance_tracker.services.transaction_service import TransactionService
from finance_tracker.api.deps import get_current_user_id, get_transaction_service, raise_for_error

router = APIRouter(prefix="/transaction", tags=["transactions"])

NOT_FOUND = "Transaction not found"

@router.get("", response_model=List[TransactionRead])
async def read_transactions(
    sort_by: str = Query("date", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
    service: TransactionService = Depends(get_transaction_service),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    return await service.list_transactions(user_id, sort_by, sort_order)

@router.get("/{transaction_id}", response_model=TransactionRead)
async def read_transaction(
    transaction_id: int,
    service: TransactionService = Depends(get_transaction_service),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    tx = await service.get_transaction(transaction_id, user_id)
    if tx is None:
        raise_for_error(LifecycleError.not_found, NOT_FOUND)
    return tx

@router.post("", response_model=TransactionRead, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    tx_in: TransactionIn,
    service: TransactionService = Depends(get_transaction_service),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    # category_id 0 files the transaction under WITHOUT CATEGORY
    tx, error = await service.create_transaction(user_id, tx_in)
    if error:
        raise_for_error(error, NOT_FOUND)
    return tx

@router.put("/{transaction_id}", response_model=TransactionRead)
async def update_transaction(
    transaction_id: int,
    tx_in: TransactionIn,
    service: TransactionService = Depends(get_transaction_service),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    tx, error = await service.update_transaction(transaction_id, user_id, tx_in)
    if error:
        raise_for_error(error, NOT_FOUND)
    return tx

@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_transaction(
    transaction_id: int,
    service: TransactionService = Depends(get_transaction_service),
    user_id: uuid.UUID = Depends(get_current_user_id),
):
    _, error = await service.delete_transaction(transaction_id, user_id)
    if error:
        raise_for_error(error, NOT_FOUND)
    return None
