from fastapi import APIRouter, Depends, status
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession

from config import Settings, get_app_settings
from database import get_db
from schemas import UserRegister, UserLogin, UserCreated, Token
from security import create_access_token, get_password_context
import services

router = APIRouter()


@router.post("/register", response_model=UserCreated, status_code=status.HTTP_201_CREATED)
async def register(
        user_data: UserRegister,
        db: AsyncSession = Depends(get_db),
        pwd_context: CryptContext = Depends(get_password_context)
):
    """Register a new user"""
    user_id = await services.create_user(db, pwd_context, user_data.username, user_data.password)
    return UserCreated(id=user_id)


@router.post("/login", response_model=Token)
async def login(
        login_data: UserLogin,
        db: AsyncSession = Depends(get_db),
        pwd_context: CryptContext = Depends(get_password_context),
        settings: Settings = Depends(get_app_settings)
):
    """Login user and return an access token"""
    user_id = await services.authenticate_user(db, pwd_context, login_data.username, login_data.password)
    return Token(token=create_access_token(user_id, settings))
