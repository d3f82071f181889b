"""Application configuration settings"""

import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


def _int_env(name: str, default: int) -> int:
    """Read an integer setting, falling back to the default if unset or unparsable."""
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


class Config:
    DEBUG = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes", "on"}

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_PATH = os.getenv("LOG_PATH") or None
    LOG_FORMAT = os.getenv(
        "LOG_FORMAT",
        "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s: %(message)s",
    )

    # Links and cache directives
    BASE_URI: str = os.getenv("BASE_URI", "").rstrip("/")
    CONVO_LIST_MAX_AGE: int = _int_env("CONVO_LIST_MAX_AGE", 15)
    CONVO_MAX_AGE: int = _int_env("CONVO_MAX_AGE", 3600)
    MESSAGE_LIST_MAX_AGE: int = _int_env("MESSAGE_LIST_MAX_AGE", 15)
    MESSAGE_MAX_AGE: int = _int_env("MESSAGE_MAX_AGE", 3600)

    # Paging
    DEFAULT_PAGE_SIZE: int = _int_env("DEFAULT_PAGE_SIZE", 10)
    DEFAULT_PAGE_INDEX: int = _int_env("DEFAULT_PAGE_INDEX", 0)
    DEFAULT_MAX_PAGE_COUNT: int = _int_env("DEFAULT_MAX_PAGE_COUNT", 50)

    # Redis settings (empty URL = in-process cache)
    REDIS_URL: str = os.getenv("REDIS_URL", "")
    SERVER_CACHE_TTL: int = _int_env("SERVER_CACHE_TTL", 3600)

    # Postgresql Database settings (empty URL = in-memory store)
    DATABASE_URL: str = os.getenv("DATABASE_URL", "")
    DATABASE_POOL_MIN_SIZE: int = _int_env("DATABASE_POOL_MIN_SIZE", 1)
    DATABASE_POOL_MAX_SIZE: int = _int_env("DATABASE_POOL_MAX_SIZE", 10)


@dataclass(frozen=True)
class ContractSettings:
    """Immutable settings handed to the manager and contract at composition time."""

    base_uri: str = ""
    convo_list_max_age: int = 15
    convo_max_age: int = 3600
    message_list_max_age: int = 15
    message_max_age: int = 3600
    default_page_size: int = 10
    default_page_index: int = 0
    max_page_count: int = 50
    server_cache_ttl: int = 3600

    @classmethod
    def from_config(cls) -> "ContractSettings":
        return cls(
            base_uri=Config.BASE_URI,
            convo_list_max_age=Config.CONVO_LIST_MAX_AGE,
            convo_max_age=Config.CONVO_MAX_AGE,
            message_list_max_age=Config.MESSAGE_LIST_MAX_AGE,
            message_max_age=Config.MESSAGE_MAX_AGE,
            default_page_size=Config.DEFAULT_PAGE_SIZE,
            default_page_index=Config.DEFAULT_PAGE_INDEX,
            max_page_count=Config.DEFAULT_MAX_PAGE_COUNT,
            server_cache_ttl=Config.SERVER_CACHE_TTL,
        )
