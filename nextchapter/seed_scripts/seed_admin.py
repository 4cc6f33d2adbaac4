import asyncio
import sys
from typing import Optional

from sqlalchemy import select

from nextchapter.common.logging_setup import get_logger, setup_logging, shutdown_logging
from nextchapter.common.utils import now
from nextchapter.config.admin_config import admin_config
from nextchapter.db.connection import async_engine, async_session
from nextchapter.schema.full_schema import UserRoleName, Users

logger = get_logger("nextchapter.seed")


async def grant_admin(session_maker, user_id: str, email: Optional[str] = None) -> Users:
    """Give the identity-provider subject `user_id` the admin role , creating its row if it never signed in."""
    async with session_maker() as session:
        res = await session.execute(select(Users).where(Users.id == user_id))
        user = res.scalar_one_or_none()

        if user is None:
            user = Users(id=user_id, email=email, role=UserRoleName.ADMIN.value)
            session.add(user)
            logger.info("seed.admin.created", extra={"user_identifier": user_id})
        else:
            user.role = UserRoleName.ADMIN.value
            user.is_disabled = False
            user.updated_at = now()
            logger.info("seed.admin.promoted", extra={"user_identifier": user_id})

        await session.commit()
        return user


async def main(argv):
    user_id = argv[1] if len(argv) > 1 else admin_config.ADMIN_USER_ID
    if not user_id:
        raise SystemExit("usage: python -m nextchapter.seed_scripts.seed_admin <user_id>  (or set ADMIN_USER_ID)")

    setup_logging()
    try:
        await grant_admin(async_session, user_id, email=argv[2] if len(argv) > 2 else None)
    finally:
        await async_engine.dispose()
        shutdown_logging()


if __name__ == "__main__":
    asyncio.run(main(sys.argv))
