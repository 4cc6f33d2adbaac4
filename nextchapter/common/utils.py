from datetime import datetime,timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Optional, Union

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

TWO_PLACES = Decimal("0.01")
ONE_PLACE = Decimal("0.1")


def now() -> datetime:
    return datetime.now(timezone.utc)


def to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() first so floats coming back from the driver don't drag binary noise along
    return Decimal(str(value))


def round_money(value: Any) -> Decimal:
    return to_decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def round_rating(value: Any) -> Decimal:
    return to_decimal(value).quantize(ONE_PLACE, rounding=ROUND_HALF_UP)


def build_error(message: str,
                code: Union[str, int] = "UNKNOWN_ERROR",
                details: Optional[Any] = None,
                request_id: Optional[str] = None) -> Dict[str, Any]:
    body = {"error": message, "code": code, "request_id": request_id}
    if details is not None:
        body["details"] = details
    return body


def json_ok(content: Any, status_code: int = 200,headers = None) -> JSONResponse:
    return JSONResponse(jsonable_encoder(content), status_code=status_code,headers=headers)

def json_error(content: Dict[str, Any], status_code: int = 500, headers=None) -> JSONResponse:
    return JSONResponse(jsonable_encoder(content), status_code=status_code, headers=headers)
