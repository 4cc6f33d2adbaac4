from pydantic import BaseModel, Field


class CartItemInput(BaseModel):
    book_id: int = Field(..., gt=0)
    quantity: int = Field(1, ge=1, le=100)

    model_config = {"extra": "forbid"}


class CartItemUpdate(BaseModel):
    book_id: int = Field(..., gt=0)
    quantity: int = Field(..., ge=1, le=100)


class CartItemRemove(BaseModel):
    book_id: int = Field(..., gt=0)
