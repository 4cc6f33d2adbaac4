from datetime import datetime, timedelta, timezone
import secrets
from typing import Any, Dict, Optional
from jose import jwt, JWTError
from nextchapter.config.settings import config_settings

JWT_SECRET = config_settings.JWT_SECRET
JWT_ALGO = config_settings.JWT_ALGO
ACCESS_TOKEN_EXPIRE_MINUTES = int(config_settings.ACCESS_TOKEN_EXPIRE_MINUTES)


def decode_token(token:str) -> Optional[Dict[str, Any]]:
    """To verify the signature , expiration and subject claim of a session token"""
    try:
        token_data=jwt.decode(
            token,
            key=JWT_SECRET,
            algorithms=[JWT_ALGO]
        )
    except JWTError:
        return None
    if not token_data.get("sub"):
        return None
    return token_data


# sessions are issued by the identity provider in prod , this is used by seed scripts and tests
def create_access_token(user_id:str,email:Optional[str]=None,expires_dur:int=ACCESS_TOKEN_EXPIRE_MINUTES,**claims):
    now=datetime.now(timezone.utc)
    expiry= now + (timedelta(minutes=expires_dur))

    payload = {
        "sub": str(user_id),
        "iat": int(now.timestamp()),
        "exp": int(expiry.timestamp()),
        "jti": secrets.token_hex(16),
    }
    if email:
        payload["email"] = email
    payload.update(claims)
    token=jwt.encode(claims=payload,key=JWT_SECRET,algorithm=JWT_ALGO)
    return token
