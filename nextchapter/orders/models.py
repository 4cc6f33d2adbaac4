from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class UpdateTrackingInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    order_id: int = Field(..., alias="orderId", gt=0)
    tracking_number: str = Field(..., alias="trackingNumber", min_length=1, max_length=128)
    delivery_status: str = Field(..., alias="deliveryStatus", min_length=1)


class UpdateOrderStatusInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    order_id: int = Field(..., alias="orderId", gt=0)
    new_status: str = Field(..., alias="newStatus", min_length=1)
    tracking_number: Optional[str] = Field(None, alias="trackingNumber", max_length=128)
