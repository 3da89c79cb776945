"""
API request and response models for the catalog REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
catalog/models.py, which own the internal domain representation. Route
handlers map between the two.

Request models declare every field Optional. "Missing" is a business rule
with its own 400 message (see api/routes/), not a schema error, so the
handlers check presence explicitly after authentication has run.

Product responses use camelCase keys (userId, createdAt, updatedAt) -- the
wire format clients already consume. FastAPI serializes response models by
alias, so handlers build them with snake_case names.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from catalog.models import Product

# bcrypt ignores input beyond 72 bytes; cap well inside it.
_PASSWORD_MAX = 64


# ---------------------------------------------------------------------------
# Auth -- request models
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Request body for POST /auth/register.

    No whitespace stripping here: passwords are taken exactly as typed.
    """

    email: Optional[str] = Field(default=None, max_length=255)
    password: Optional[str] = Field(default=None, max_length=_PASSWORD_MAX)
    name: Optional[str] = Field(default=None, max_length=255)


class LoginRequest(BaseModel):
    """Request body for POST /auth/login."""

    email: Optional[str] = Field(default=None, max_length=255)
    password: Optional[str] = Field(default=None, max_length=_PASSWORD_MAX)


# ---------------------------------------------------------------------------
# Auth -- response models
# ---------------------------------------------------------------------------


class UserOut(BaseModel):
    """Public view of a user. Never carries the password hash."""

    model_config = ConfigDict(frozen=True)

    id: str
    email: str
    name: str


class AuthResponse(BaseModel):
    """Response for register and login: the user plus a bearer token."""

    model_config = ConfigDict(frozen=True)

    user: UserOut
    token: str


# ---------------------------------------------------------------------------
# Products -- request models
# ---------------------------------------------------------------------------


class ProductCreate(BaseModel):
    """Request body for POST /products."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = Field(default=None, max_length=5000)
    # strict: JSON numbers only, no bool or numeric-string coercion
    price: Optional[float] = Field(default=None, strict=True)


class ProductUpdate(BaseModel):
    """Request body for PUT /products/{id}.

    Only fields present in the JSON body are applied (model_fields_set), so a
    client can change the price without resending the name.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = Field(default=None, max_length=5000)
    price: Optional[float] = Field(default=None, strict=True)


# ---------------------------------------------------------------------------
# Products -- response models
# ---------------------------------------------------------------------------


class ProductResponse(BaseModel):
    """One product as returned by every product endpoint."""

    model_config = ConfigDict(frozen=True)

    id: str
    owner_id: str = Field(serialization_alias="userId")
    name: str
    description: Optional[str] = None
    price: float
    created_at: str = Field(serialization_alias="createdAt")
    updated_at: str = Field(serialization_alias="updatedAt")

    @classmethod
    def from_product(cls, product: Product) -> "ProductResponse":
        """Build a ProductResponse from a catalog Product dataclass."""
        return cls(
            id=product.id,
            owner_id=product.owner_id,
            name=product.name,
            description=product.description,
            price=product.price,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )


class DeleteResponse(BaseModel):
    """Response for DELETE /products/{id}."""

    model_config = ConfigDict(frozen=True)

    success: bool = True


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------


class ErrorResponse(BaseModel):
    """Error envelope returned on every 4xx/5xx response.

    error   -- human-readable message; clients display it verbatim
    code    -- machine-readable identifier
    detail  -- optional extra context (validation errors only)
    """

    model_config = ConfigDict(frozen=True)

    error: str
    code: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """Response for GET /health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str]
