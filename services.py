import functools
import logging
from typing import List, Optional

from passlib.context import CryptContext
from sqlalchemy import case, delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from common.enum import TransactionTypeEnum
from errors import AuthError, NotFoundError, StoreError, ValidationError
from models import Transaction, User
from schemas import TransactionIn
from security import hash_password, verify_password

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = "All fields (type, category, amount, date) are required"
AMOUNT_NOT_NUMBER_MESSAGE = "Amount must be a number"


def store_operation(operation):
    """Wrap persistence failures of a service call in StoreError"""
    @functools.wraps(operation)
    async def wrapper(*args, **kwargs):
        try:
            return await operation(*args, **kwargs)
        except SQLAlchemyError as exc:
            raise StoreError(f"{operation.__name__} failed: {exc}") from exc
    return wrapper


# ---------------- USERS ---------------- #

@store_operation
async def create_user(db: AsyncSession, pwd_context: CryptContext, username: str, password: str) -> int:
    # Argon2 is CPU-bound; hashing runs in the threadpool, off the event loop
    hashed_password = await run_in_threadpool(hash_password, pwd_context, password)
    # A duplicate username is rejected by the unique constraint
    db_user = User(username=username, password=hashed_password)
    db.add(db_user)
    await db.commit()
    logger.info("Registered user %s", db_user.id)
    return db_user.id


@store_operation
async def authenticate_user(
        db: AsyncSession,
        pwd_context: CryptContext,
        username: Optional[str],
        password: Optional[str]
) -> int:
    user = None
    if username:
        result = await db.execute(select(User).where(User.username == username))
        user = result.scalar_one_or_none()

    stored_hash = user.password if user is not None else None
    if not await run_in_threadpool(verify_password, pwd_context, password or "", stored_hash):
        logger.warning("Failed login for username %r", username)
        raise AuthError()

    return user.id


# ---------------- TRANSACTIONS ---------------- #

def validate_transaction(data: TransactionIn) -> None:
    """Presence check treats every falsy value as missing, including amount 0"""
    if not data.type or not data.category or not data.amount or not data.date:
        raise ValidationError(REQUIRED_FIELDS_MESSAGE)

    # bool is an int subclass but not a JSON number
    if isinstance(data.amount, bool) or not isinstance(data.amount, (int, float)):
        raise ValidationError(AMOUNT_NOT_NUMBER_MESSAGE)


@store_operation
async def create_transaction(db: AsyncSession, data: TransactionIn) -> int:
    validate_transaction(data)
    transaction = Transaction(
        type=data.type,
        category=data.category,
        amount=data.amount,
        date=data.date,
        description=data.description
    )
    db.add(transaction)
    await db.commit()
    return transaction.id


@store_operation
async def list_transactions(db: AsyncSession, page: int, limit: int) -> List[Transaction]:
    # No ORDER BY: rows come back in store order
    offset = (page - 1) * limit
    result = await db.execute(select(Transaction).limit(limit).offset(offset))
    return list(result.scalars().all())


@store_operation
async def get_transaction(db: AsyncSession, transaction_id: int) -> Transaction:
    transaction = await db.get(Transaction, transaction_id)
    if transaction is None:
        raise NotFoundError()
    return transaction


@store_operation
async def update_transaction(db: AsyncSession, transaction_id: int, data: TransactionIn) -> None:
    validate_transaction(data)
    result = await db.execute(
        update(Transaction)
        .where(Transaction.id == transaction_id)
        .values(
            type=data.type,
            category=data.category,
            amount=data.amount,
            date=data.date,
            description=data.description
        )
    )
    await db.commit()
    if result.rowcount == 0:
        raise NotFoundError()


@store_operation
async def delete_transaction(db: AsyncSession, transaction_id: int) -> None:
    result = await db.execute(delete(Transaction).where(Transaction.id == transaction_id))
    await db.commit()
    if result.rowcount == 0:
        raise NotFoundError()


# ---------------- REPORTS ---------------- #

def _sum_of_type(transaction_type: TransactionTypeEnum):
    return func.sum(
        case((Transaction.type == transaction_type.value, Transaction.amount), else_=0)
    )


@store_operation
async def get_summary(
        db: AsyncSession,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        category: Optional[str] = None
) -> dict:
    total_income = _sum_of_type(TransactionTypeEnum.INCOME)
    total_expense = _sum_of_type(TransactionTypeEnum.EXPENSE)

    query = select(
        total_income.label("total_income"),
        total_expense.label("total_expense"),
        (total_income - total_expense).label("balance")
    ).select_from(Transaction)

    # Apply filters
    if start_date:
        query = query.where(Transaction.date >= start_date)
    if end_date:
        query = query.where(Transaction.date <= end_date)
    if category:
        query = query.where(Transaction.category == category)

    row = (await db.execute(query)).one()
    return {
        "total_income": row.total_income,
        "total_expense": row.total_expense,
        "balance": row.balance
    }


@store_operation
async def get_monthly_report(db: AsyncSession) -> List[dict]:
    month = func.strftime("%Y-%m", Transaction.date).label("month")
    query = (
        select(month, Transaction.category, func.sum(Transaction.amount).label("total_spending"))
        .where(Transaction.type == TransactionTypeEnum.EXPENSE.value)
        .group_by(month, Transaction.category)
    )
    result = await db.execute(query)
    return [
        {"month": row.month, "category": row.category, "total_spending": row.total_spending}
        for row in result
    ]
