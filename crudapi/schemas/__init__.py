"""Pydantic schemas used across the project."""
from datetime import datetime
from typing import Annotated, ClassVar, Generic, Optional, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field, model_validator
from pydantic.alias_generators import to_camel

from crudapi.modules.common.listing import PaginatedResult

T = TypeVar("T")


class CamelModel(BaseModel):
    """Accepts and emits camelCase keys; snake_case is accepted too."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def _normalize_email(value: str) -> str:
    return value.strip().lower()


Email = Annotated[EmailStr, AfterValidator(_normalize_email)]


class PartialUpdate(CamelModel):
    """Every field may be omitted, but columns listed in ``not_null`` cannot be cleared."""

    not_null: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="after")
    def reject_nulls(self):
        for name in self.not_null:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} may not be null")
        return self


# ── auth ─────────────────────────────────────────────────────


class LoginRequest(BaseModel):
    email: Email
    password: str = Field(..., min_length=1)


class RegisterRequest(CamelModel):
    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: Optional[str] = Field(default=None, max_length=255)
    email: Email
    password: str = Field(..., min_length=5)
    phone: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    url_twitter: Optional[str] = None
    url_github: Optional[str] = None


class VerifyRequest(BaseModel):
    id: str = Field(..., min_length=1)


class ForgotPasswordRequest(BaseModel):
    email: Email


class ResetPasswordRequest(BaseModel):
    id: str = Field(..., min_length=1)
    password: str = Field(..., min_length=5)


class AccountInfoResponse(BaseModel):
    id: int
    name: str
    email: str
    role: str
    verified: bool
    verification: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    token: str
    user: AccountInfoResponse

    model_config = ConfigDict(from_attributes=True)


class VerifyResponse(BaseModel):
    email: str
    verified: bool


class TokenResponse(BaseModel):
    token: str


class MessageResponse(BaseModel):
    msg: str
    verification: Optional[str] = None


# ── users ────────────────────────────────────────────────────


class UserCreate(CamelModel):
    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: Optional[str] = Field(default=None, max_length=255)
    email: Email
    password: str = Field(..., min_length=5)
    role: str = Field(default="user", pattern="^(user|admin|superadmin|developer|agent|owner)$")
    verified: bool = False
    phone: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    url_twitter: Optional[str] = None
    url_github: Optional[str] = None


class UserUpdate(PartialUpdate):
    not_null: ClassVar[tuple[str, ...]] = ("first_name", "email", "password", "role", "verified")

    first_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    last_name: Optional[str] = Field(default=None, max_length=255)
    email: Optional[Email] = None
    password: Optional[str] = Field(default=None, min_length=5)
    role: Optional[str] = Field(default=None, pattern="^(user|admin|superadmin|developer|agent|owner)$")
    verified: Optional[bool] = None
    phone: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    url_twitter: Optional[str] = None
    url_github: Optional[str] = None


class UserResponse(CamelModel):
    id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: str
    role: str
    verified: bool
    phone: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    url_twitter: Optional[str] = None
    url_github: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ── bots ─────────────────────────────────────────────────────


class BotCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    is_active: bool = True


class BotUpdate(PartialUpdate):
    not_null: ClassVar[tuple[str, ...]] = ("name", "is_active")

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    is_active: Optional[bool] = None


class BotResponse(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ── envelopes ────────────────────────────────────────────────


class PaginatedResponse(CamelModel, Generic[T]):
    ok: bool = True
    total_docs: int
    limit: int
    total_pages: int
    page: int
    paging_counter: int
    has_prev_page: bool
    has_next_page: bool
    prev_page: Optional[int] = None
    next_page: Optional[int] = None
    payload: list[T]

    @classmethod
    def from_result(cls, result: PaginatedResult, item_model: type[BaseModel]) -> "PaginatedResponse":
        return cls(
            total_docs=result.total_count,
            limit=result.limit,
            total_pages=result.total_pages,
            page=result.page,
            paging_counter=result.paging_counter,
            has_prev_page=result.has_prev_page,
            has_next_page=result.has_next_page,
            prev_page=result.prev_page,
            next_page=result.next_page,
            payload=[item_model.model_validate(item) for item in result.items],
        )


class SuccessResponse(BaseModel, Generic[T]):
    ok: bool = True
    payload: T


class HealthDatabase(BaseModel):
    connected: bool


class HealthResponse(BaseModel):
    status: str
    version: str
    environment: str
    database: HealthDatabase
    uptime: float
    requests: int
    errors: int
