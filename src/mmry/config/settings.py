"""Configuration settings for the cache, read from the environment."""
import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import find_dotenv, load_dotenv


@dataclass
class CacheSettings:
    # TTL string applied when put() is called without one; unset means no expiry
    default_ttl: Optional[str] = field(
        default_factory=lambda: os.getenv("MMRY_DEFAULT_TTL") or None
    )


@dataclass
class Settings:
    cache: CacheSettings = field(default_factory=CacheSettings)
    # read by setup_logging() when called without a level
    log_level: str = field(default_factory=lambda: os.getenv("MMRY_LOG_LEVEL", "INFO"))

    @classmethod
    def from_env(cls) -> "Settings":
        """Load a .env from the working directory, then read the environment.

        Only called on demand, so importing the package leaves os.environ alone.
        """
        load_dotenv(find_dotenv(usecwd=True))
        return cls()
