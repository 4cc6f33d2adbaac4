from nextchapter.config.settings import config_settings


def _normalize_db_url(url: str | None) -> str | None:
    # hosted postgres often returns "postgres://..." , asyncpg/SQLAlchemy needs "postgresql+asyncpg://..."
    if not url:
        return None
    if url.startswith("postgres://",):
        return url.replace("postgres://", "postgresql+asyncpg://", 1)
    if url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


def _engine_kwargs(url: str) -> dict:
    # sqlite (tests, local runs) has no server side pool to size
    if url.startswith("sqlite"):
        return {}
    return {"pool_size": config_settings.DB_POOL_SIZE, "pool_pre_ping": True}
