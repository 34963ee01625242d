"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands.
"""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, Field, field_validator


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class OrderLineRequest(BaseModel):
    product_id: str = Field(validation_alias=AliasChoices("product_id", "productId"))
    quantity: int = Field(ge=1)
    price: float = Field(ge=0)

    @field_validator("product_id", mode="before")
    @classmethod
    def _product_id_as_str(cls, value):
        # Clients may send numeric identifiers
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class PlaceOrderRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [
                        {"product_id": "prod-001", "quantity": 2, "price": 10.0},
                        {"product_id": "prod-002", "quantity": 1, "price": 5.0},
                    ]
                }
            ]
        }
    }

    order: dict | None = None  # Accepted for compatibility, not interpreted
    items: list[OrderLineRequest]


class UpdateOrderRequest(BaseModel):
    status: str = Field(..., max_length=50)


# ---------------------------------------------------------------------------
# Order Response Schemas
# ---------------------------------------------------------------------------
class OrderItemResponse(BaseModel):
    id: str
    order_id: str
    product_id: str
    quantity: int
    price: float


class OrderSummaryResponse(BaseModel):
    id: str
    user_id: str
    status: str
    payment_intent_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class OrderResponse(OrderSummaryResponse):
    items: list[OrderItemResponse] = []


# ---------------------------------------------------------------------------
# Product Schemas
# ---------------------------------------------------------------------------
class CreateProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Espresso Beans 1kg",
                    "description": "Dark roast, whole bean.",
                    "image": "https://cdn.example.com/espresso.jpg",
                    "price": 24.5,
                }
            ]
        }
    }

    name: str = Field(..., max_length=255)
    description: str | None = None
    image: str | None = Field(None, max_length=255)
    price: float = Field(..., ge=0)


class UpdateProductRequest(BaseModel):
    name: str | None = Field(None, max_length=255)
    description: str | None = None
    image: str | None = Field(None, max_length=255)
    price: float | None = Field(None, ge=0)


class ProductResponse(BaseModel):
    id: str
    name: str
    description: str | None = None
    image: str | None = None
    price: float
    created_at: datetime | None = None
    updated_at: datetime | None = None


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------
class ErrorResponse(BaseModel):
    message: str
    kind: str
    errors: dict[str, list[str]] | None = None
