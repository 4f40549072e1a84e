"""
SQLAlchemy ORM models: users, their session tokens, and todos.
"""

from __future__ import annotations

import uuid

from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, relationship


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)

    tokens = relationship(
        "UserToken",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="UserToken.id",
    )
    todos = relationship("Todo", cascade="all, delete-orphan", passive_deletes=True)


class UserToken(Base):
    __tablename__ = "user_tokens"

    # autoincrement id doubles as issuance order
    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    purpose = Column(String(32), nullable=False, default="auth")
    value = Column(Text, nullable=False, unique=True)

    user = relationship("User", back_populates="tokens")

    __table_args__ = (
        Index("ix_user_tokens_user_id", "user_id"),
    )


class Todo(Base):
    __tablename__ = "todos"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    text = Column(Text, nullable=False)
    completed = Column(Boolean, nullable=False, default=False)
    completed_at = Column(BigInteger, nullable=True)   # epoch milliseconds
    creator_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    __table_args__ = (
        Index("ix_todos_creator_id", "creator_id"),
    )
