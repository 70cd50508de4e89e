from redis import Redis
from rapport.settings import settings


def get_redis() -> Redis:
    return Redis.from_url(settings.REDIS_URL, decode_responses=True)


def key(*parts) -> str:
    """Namespaced key, e.g. key("follow", "followers", uid) -> "rapport:follow:followers:<uid>"."""
    return ":".join([settings.KEY_PREFIX, *[str(p) for p in parts]])
