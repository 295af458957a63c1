"""
shapes.py — Declared Request Body Shapes

Each route that accepts a body declares one of these models. They are plain
declarations; `validator.validate()` interprets them and is the only code that
turns raw JSON into something a handler sees.

Conventions:
- Wire names are camelCase (`inStock`, `productId`); attributes are snake_case.
- Unknown keys are dropped.
- No coercion across JSON kinds: "10" is not a number, 10 is not a string,
  and only true/false are booleans. A whole float such as 2.0 is an integer.
- Emails are bare addresses; "Name <addr>" forms are rejected.
- `PARTIAL = True` shapes normalize to only the fields the client sent
  (merge update), instead of filling in defaults.
"""

from typing import Annotated, Any, ClassVar, Dict, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from app.models.user import Role


# -----------------------------------------------------------------------------
# Base
# -----------------------------------------------------------------------------

class RequestShape(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        extra="ignore",
    )

    PARTIAL: ClassVar[bool] = False

    def normalized(self) -> Dict[str, Any]:
        """Validated fields keyed by attribute name, defaults applied unless PARTIAL."""
        return self.model_dump(exclude_unset=self.PARTIAL)


def _require_number(v: Any) -> Any:
    # bool is an int subclass; JSON true/false is not a price
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        raise ValueError("Expected number")
    return v


def _require_whole_number(v: Any) -> Any:
    # 2.0 is a whole number; 1.5, "2" and true are not
    if isinstance(v, float) and v.is_integer():
        return int(v)
    if isinstance(v, bool) or not isinstance(v, int):
        raise ValueError("Expected integer")
    return v


def _reject_display_name(v: Any) -> Any:
    # EmailStr would silently unwrap "Bob <bob@example.com>" to the bare address
    if isinstance(v, str) and ("<" in v or ">" in v):
        raise ValueError("value is not a valid email address: display names are not allowed")
    return v


# -----------------------------------------------------------------------------
# Field Types
# -----------------------------------------------------------------------------

PersonName = Annotated[str, Field(strict=True, min_length=2, max_length=80)]
Password = Annotated[str, Field(strict=True, min_length=6, max_length=100)]
ProductName = Annotated[str, Field(strict=True, min_length=2, max_length=120)]
ProductDescription = Annotated[str, Field(strict=True, min_length=0, max_length=500)]
Price = Annotated[float, BeforeValidator(_require_number), Field(gt=0, allow_inf_nan=False)]
StockFlag = Annotated[bool, Field(strict=True)]
EmailAddress = Annotated[EmailStr, BeforeValidator(_reject_display_name)]
Quantity = Annotated[int, BeforeValidator(_require_whole_number), Field(gt=0)]


# -----------------------------------------------------------------------------
# Auth
# -----------------------------------------------------------------------------

class RegisterRequest(RequestShape):
    name: PersonName
    email: EmailAddress
    password: Password
    role: Optional[Role] = None

    @field_validator("role", mode="after")
    @classmethod
    def role_not_null(cls, v):
        # optional means "may be omitted", not "may be null"
        if v is None:
            raise ValueError("Expected 'user' or 'admin'")
        return v


class LoginRequest(RequestShape):
    email: EmailAddress
    password: Annotated[str, Field(strict=True, min_length=1)]


# -----------------------------------------------------------------------------
# Catalog
# -----------------------------------------------------------------------------

class ProductCreateRequest(RequestShape):
    name: ProductName
    description: ProductDescription = ""
    price: Price
    in_stock: StockFlag = True


class ProductUpdateRequest(RequestShape):
    """Same fields as create, all optional. Omitted fields keep their value."""

    PARTIAL: ClassVar[bool] = True

    name: Optional[ProductName] = None
    description: Optional[ProductDescription] = None
    price: Optional[Price] = None
    in_stock: Optional[StockFlag] = None

    @field_validator("name", "description", "price", "in_stock", mode="after")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("Field may be omitted but not null")
        return v


# -----------------------------------------------------------------------------
# Orders
# -----------------------------------------------------------------------------

class OrderItemRequest(RequestShape):
    product_id: Annotated[str, Field(strict=True, min_length=1)]
    qty: Quantity


class OrderCreateRequest(RequestShape):
    items: Annotated[List[OrderItemRequest], Field(min_length=1)]
