"""SQLAlchemy ORM models."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from crudapi.infrastructure.database.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255))
    email = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)
    role = Column(String(50), nullable=False, default="user")
    verification = Column(String(255), index=True)
    verified = Column(Boolean, nullable=False, default=False)
    phone = Column(String(50))
    city = Column(String(255))
    country = Column(String(255))
    url_twitter = Column(Text)
    url_github = Column(Text)
    login_attempts = Column(Integer, nullable=False, default=0)
    block_expires = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())


class UserAccess(Base):
    __tablename__ = "user_access"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, index=True)
    ip = Column(Text, nullable=False)
    browser = Column(Text, nullable=False)
    country = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())


class ForgotPassword(Base):
    __tablename__ = "forgot_passwords"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, index=True)
    verification = Column(String(255), index=True)
    used = Column(Boolean, nullable=False, default=False)
    ip_request = Column(Text)
    browser_request = Column(Text)
    country_request = Column(Text)
    ip_changed = Column(Text)
    browser_changed = Column(Text)
    country_changed = Column(Text)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())


class Bot(Base):
    __tablename__ = "bots"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), unique=True, nullable=False)
    description = Column(Text)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
