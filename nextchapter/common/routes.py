from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import  AsyncSession
from nextchapter.common.custom_exceptions import StorageError
from nextchapter.common.utils import json_ok
from nextchapter.db.dependencies import get_session

home_router = APIRouter()


@home_router.get("/health")
async def health_check(session:AsyncSession=Depends(get_session)):
    try:
        await session.execute(select(1))
    except SQLAlchemyError as e:
        raise StorageError("Database connection error", details="Unable to connect to the database") from e

    return json_ok({"status": "healthy"})
