from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import  AsyncSession
from nextchapter.db.connection import async_session

async def get_session() -> AsyncGenerator[AsyncSession,None]:
    async with async_session() as session:  # session is released back to the pool at the end of the with block
        yield session
