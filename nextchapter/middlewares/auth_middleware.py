from typing import Sequence
from fastapi import HTTPException, Request, status
from starlette.middleware.base import BaseHTTPMiddleware
from nextchapter.auth.dependencies import Authentication
from nextchapter.common.logging_setup import get_logger
from nextchapter.common.utils import build_error, json_error
from nextchapter.common.constants import request_id_ctx
from nextchapter.user.repository import provision_user

logger = get_logger("nextchapter.middlewares")


class AuthenticationMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, *, session_maker, paths: Sequence[str]):
        super().__init__(app)
        self.session_maker = session_maker
        self.paths = tuple(paths)

    async def dispatch(self, request: Request, call_next):

        if request.method == "OPTIONS" or request.url.path.startswith(self.paths):
            return await call_next(request)

        try:
            auth_token = await Authentication()(request)
        except HTTPException as e:
            reason = getattr(e, "detail", "Missing or Invalid Auth Headers")
            logger.warning("auth.middleware.failed", extra={
                "reason": reason,
                "path": request.url.path,
                "method": request.method
            })
            payload = build_error("Unauthorized", code="INVALID_AUTH",
                                  details="User not authenticated", request_id=request_id_ctx.get())
            return json_error(payload, status_code=status.HTTP_401_UNAUTHORIZED)

        async with self.session_maker() as session:
            user = await provision_user(session, auth_token)

        if not user:
            payload = build_error("Unauthorized", code="INVALID_AUTH",
                                  details="User unidentified", request_id=request_id_ctx.get())
            return json_error(payload, status_code=status.HTTP_401_UNAUTHORIZED)

        if user["is_disabled"]:
            logger.warning("auth.middleware.user_disabled", extra={
                "user_id": user["id"],
                "path": request.url.path
            })
            payload = build_error("Account disabled", code="USER_DISABLED", request_id=request_id_ctx.get())
            return json_error(payload, status_code=status.HTTP_403_FORBIDDEN)

        request.state.user_identifier = user["id"]
        request.state.user_roles = [user["role"]]

        logger.debug("auth.middleware.success", extra={
            "user_id": user["id"],
            "path": request.url.path
        })

        return await call_next(request)
