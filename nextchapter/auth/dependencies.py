from fastapi import Request,HTTPException,status
from fastapi.security import HTTPBearer
from nextchapter.auth.utils import decode_token
from nextchapter.common.custom_exceptions import Unauthorized
from nextchapter.config.admin_config import admin_config
from nextchapter.schema.full_schema import UserRoleName


class Authentication(HTTPBearer):
    def __init__(self,auto_error=True):
        super().__init__(auto_error=auto_error)

    async def __call__(self, request:Request) -> dict:
        auth_creds=await super().__call__(request)
        token=auth_creds.credentials

        decoded_token=decode_token(token)

        if not decoded_token:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED,detail="Invalid or expired token provided.")

        return decoded_token


def current_user_id(request: Request) -> str:
    user_id = getattr(request.state, "user_identifier", None)
    if not user_id:
        raise Unauthorized(details="User not authenticated")
    return user_id


def require_admin(request: Request) -> str:
    user_id = current_user_id(request)
    roles = getattr(request.state, "user_roles", None) or []
    if user_id == admin_config.ADMIN_USER_ID or UserRoleName.ADMIN.value in roles:
        return user_id
    raise Unauthorized("Not authorized as admin")
