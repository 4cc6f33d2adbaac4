from pydantic import BaseModel, ConfigDict, Field


class UpdateUserStatusInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId", min_length=1, max_length=128)
    is_disabled: bool = Field(..., alias="isDisabled")
