from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field


class CreateOrderInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    amount: Decimal
    shipping_address: str = Field(..., alias="shippingAddress", max_length=2000)


class VerifyPaymentInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    gateway_order_id: str = Field(..., alias="gatewayOrderId", min_length=1, max_length=128)
    gateway_payment_id: str = Field(..., alias="gatewayPaymentId", min_length=1, max_length=128)
    signature: str = Field(..., min_length=1, max_length=256)
