from pydantic import BaseModel, Field


class WishlistItemInput(BaseModel):
    book_id: int = Field(..., gt=0)
