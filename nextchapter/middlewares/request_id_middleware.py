import uuid
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from nextchapter.common.constants import request_id_ctx

class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):

        req_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

        token = request_id_ctx.set(req_id)
        try:
            response = await call_next(request)
        finally:
            request_id_ctx.reset(token)
        response.headers["X-Request-ID"] = req_id

        return response
