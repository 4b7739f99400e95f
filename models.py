from sqlalchemy import Column, Integer, String, Float

from database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String, unique=True, index=True, nullable=False)
    # Argon2 hash, never the plaintext
    password = Column(String, nullable=False)


class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    type = Column(String)
    category = Column(String)
    amount = Column(Float)
    # YYYY-MM-DD, compared lexically
    date = Column(String)
    description = Column(String, nullable=True)
