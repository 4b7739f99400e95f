from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from database import get_db
from errors import NotFoundError
from schemas import TransactionIn, TransactionResponse, TransactionCreated, Message
import services

router = APIRouter(prefix="/transactions", tags=["transactions"])


MAX_ROW_ID = 2 ** 63 - 1


def parse_transaction_id(transaction_id: str) -> int:
    """Path id that is not a storable integer matches no row"""
    try:
        parsed = int(transaction_id)
    except ValueError:
        raise NotFoundError() from None
    if not -MAX_ROW_ID <= parsed <= MAX_ROW_ID:
        raise NotFoundError()
    return parsed


# Transaction CRUD Operations
@router.post("", response_model=TransactionCreated, status_code=status.HTTP_201_CREATED)
async def create_transaction(
        transaction_data: TransactionIn,
        db: AsyncSession = Depends(get_db)
):
    """Create a new transaction"""
    transaction_id = await services.create_transaction(db, transaction_data)
    return TransactionCreated(id=transaction_id)


@router.get("", response_model=List[TransactionResponse])
async def list_transactions(
        page: int = Query(1),
        limit: int = Query(10),
        db: AsyncSession = Depends(get_db)
):
    """List one page of transactions"""
    return await services.list_transactions(db, page, limit)


@router.get("/{transaction_id}", response_model=TransactionResponse)
async def get_transaction(
        transaction_id: int = Depends(parse_transaction_id),
        db: AsyncSession = Depends(get_db)
):
    """Get a specific transaction"""
    return await services.get_transaction(db, transaction_id)


@router.put("/{transaction_id}", response_model=Message)
async def update_transaction(
        transaction_data: TransactionIn,
        transaction_id: int = Depends(parse_transaction_id),
        db: AsyncSession = Depends(get_db)
):
    """Replace every field of a transaction"""
    await services.update_transaction(db, transaction_id, transaction_data)
    return Message(message="Transaction updated successfully")


@router.delete("/{transaction_id}", response_model=Message)
async def delete_transaction(
        transaction_id: int = Depends(parse_transaction_id),
        db: AsyncSession = Depends(get_db)
):
    """Delete a transaction"""
    await services.delete_transaction(db, transaction_id)
    return Message(message="Transaction deleted successfully")
