from pydantic import BaseModel
from typing import Any, Optional


# Auth Schemas
class UserRegister(BaseModel):
    username: str
    password: str


class UserLogin(BaseModel):
    # Optional so a missing field is a failed login, not a malformed request
    username: Optional[str] = None
    password: Optional[str] = None


class UserCreated(BaseModel):
    id: int
    message: str = "User registered successfully"


class Token(BaseModel):
    token: str


# Transaction Schemas
class TransactionIn(BaseModel):
    """Body of POST and PUT /transactions.

    Presence and type checks happen in ``services.validate_transaction`` so
    that they answer with 400 and the documented messages.
    """

    type: Optional[str] = None
    category: Optional[str] = None
    amount: Any = None
    date: Optional[str] = None
    description: Optional[str] = None


class TransactionResponse(BaseModel):
    id: int
    type: Optional[str]
    category: Optional[str]
    amount: Optional[float]
    date: Optional[str]
    description: Optional[str]

    class Config:
        from_attributes = True


class TransactionCreated(BaseModel):
    id: int
    message: str = "Transaction added successfully"


class Message(BaseModel):
    message: str


# Report Schemas
class Summary(BaseModel):
    # SUM over zero rows is NULL
    total_income: Optional[float]
    total_expense: Optional[float]
    balance: Optional[float]


class MonthlySpending(BaseModel):
    month: Optional[str]
    category: Optional[str]
    total_spending: float
