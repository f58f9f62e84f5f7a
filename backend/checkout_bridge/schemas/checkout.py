from typing import Literal

from pydantic import BaseModel, Field


class LineItem(BaseModel, frozen=True):
    currency: str = Field(..., description="ISO currency code, lowercase")
    product_name: str
    unit_amount: int = Field(..., ge=0, description="Price in minor units")
    quantity: int = Field(1, ge=1)

    def to_stripe(self) -> dict:
        return {
            "price_data": {
                "currency": self.currency,
                "product_data": {"name": self.product_name},
                "unit_amount": self.unit_amount,
            },
            "quantity": self.quantity,
        }


class SessionDescriptor(BaseModel, frozen=True):
    mode: Literal["payment"] = "payment"
    payment_method_types: tuple[str, ...] = ("card",)
    line_items: tuple[LineItem, ...]
    success_url: str
    cancel_url: str

    def to_stripe(self) -> dict:
        return {
            "mode": self.mode,
            "payment_method_types": list(self.payment_method_types),
            "line_items": [item.to_stripe() for item in self.line_items],
            "success_url": self.success_url,
            "cancel_url": self.cancel_url,
        }


class CheckoutSession(BaseModel):
    id: str
    url: str | None = None


class PublicConfig(BaseModel):
    publishableKey: str


class CheckoutError(BaseModel):
    error: str


class WebhookAck(BaseModel):
    received: bool = True
