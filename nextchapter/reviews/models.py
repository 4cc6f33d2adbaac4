from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


# fields are optional here so missing/out of range values surface as a 400 from the service
class ReviewInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    order_id: Optional[int] = Field(None, alias="orderId")
    book_id: Optional[int] = Field(None, alias="bookId")
    rating: Optional[int] = None
