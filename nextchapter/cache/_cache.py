import redis.asyncio as redis
from nextchapter.config.settings import config_settings

redis_client = redis.Redis(
    host=config_settings.REDIS_HOST, port=config_settings.REDIS_PORT, db=config_settings.REDIS_DB,
    decode_responses=False, socket_connect_timeout=0.5, socket_timeout=0.5)

REDIS_LOCK_TIMEOUT = 5   # seconds
