from typing import Any, Dict, Optional
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from nextchapter.common.utils import now
from nextchapter.schema.full_schema import Users


def _user_dict(row) -> Dict[str, Any]:
    return {"id": row[0], "role": row[1], "is_disabled": bool(row[2])}


async def identify_user(session, user_id: str) -> Optional[Dict[str, Any]]:
    stmt = select(Users.id, Users.role, Users.is_disabled).where(Users.id == user_id)
    res = await session.execute(stmt)
    row = res.one_or_none()
    return _user_dict(row) if row else None


async def provision_user(session, claims: Dict[str, Any]) -> Dict[str, Any]:
    """Return the user row for the token subject , creating it on first sight."""
    user_id = str(claims["sub"])
    user = await identify_user(session, user_id)
    if user:
        await session.execute(update(Users).where(Users.id == user_id).values(last_seen_at=now()))
        await session.commit()
        return user

    session.add(Users(
        id=user_id,
        email=claims.get("email"),
        first_name=claims.get("first_name") or claims.get("given_name"),
        last_name=claims.get("last_name") or claims.get("family_name"),
        last_seen_at=now(),
    ))
    try:
        await session.commit()
    except IntegrityError:
        # concurrent first requests for the same subject , the other one won
        await session.rollback()

    return await identify_user(session, user_id)
