"""
API Schemas for the Bookstore API

Pydantic models for request validation and response serialization:
- User models
- Auth models
- Book models
- System models

Design Decisions:
1. camelCase on the wire (isSold, createdAt), snake_case in Python
2. Separate Request/Response: passwords are accepted, never returned
3. Partial updates: unset fields are left untouched
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialising field names as camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# =============================================================================
# User Schemas
# =============================================================================

class UserCreate(CamelModel):
    """Signup request."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Ana",
                "email": "ana@example.com",
                "password": "12345678",
            }
        }
    )


class UserUpdate(CamelModel):
    """User update request (partial)."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=8, max_length=128)


class UserCreated(CamelModel):
    """Signup response: the new id and email only."""

    id: str
    email: str


class UserResponse(CamelModel):
    """User response model."""

    id: str
    email: str
    name: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class BuyerSummary(CamelModel):
    """Buyer embedded in a book response."""

    id: str
    email: str
    name: str


# =============================================================================
# Auth Schemas
# =============================================================================

class LoginRequest(CamelModel):
    """Login request."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class TokenResponse(CamelModel):
    """Login response."""

    token: str


# =============================================================================
# Book Schemas
# =============================================================================

class BookBase(CamelModel):
    """Base book fields."""

    title: str = Field(..., min_length=1, max_length=255)
    author: str = Field(..., min_length=1, max_length=255)
    price: float = Field(..., ge=0)


class BookCreate(BookBase):
    """
    Book creation request.

    Sale state is not accepted here; new books always start available.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "The Hobbit",
                "author": "J.R.R. Tolkien",
                "price": 19.99,
            }
        }
    )


class BookUpdate(CamelModel):
    """
    Book update request (partial).

    Only catalogue fields can change. ``isSold``/``buyer`` are rejected so the
    sale state moves exclusively through the purchase endpoint.
    """

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    author: Optional[str] = Field(None, min_length=1, max_length=255)
    price: Optional[float] = Field(None, ge=0)

    model_config = ConfigDict(extra="forbid")


class BookResponse(BookBase):
    """Book response model."""

    id: str
    is_sold: bool = False
    buyer: Optional[BuyerSummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("price", mode="before")
    @classmethod
    def coerce_price(cls, v):
        """Numeric columns may come back as Decimal."""
        return float(v) if v is not None else v


class PurchaseResponse(CamelModel):
    """Purchase confirmation."""

    message: str


# =============================================================================
# System Schemas
# =============================================================================

class MessageResponse(BaseModel):
    """Error body returned by every failing endpoint."""

    message: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    components: dict[str, str] = Field(default_factory=dict)
