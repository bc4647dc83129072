# posture_scanner/config.py
import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()
logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_number(name: str, default, convert):
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return convert(value.strip())
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %s", name, value, default)
        return default


@dataclass(frozen=True)
class FetchConfig:
    """Settings handed to the HTTP fetch collaborator."""
    timeout: float = 10.0
    max_redirects: int = 5
    accept_any_status: bool = True
    user_agent: str = DEFAULT_USER_AGENT
    verify_tls: bool = True

    @classmethod
    def from_env(cls) -> "FetchConfig":
        return cls(
            timeout=_env_number("SCANNER_TIMEOUT", cls.timeout, float),
            max_redirects=_env_number("SCANNER_MAX_REDIRECTS", cls.max_redirects, int),
            accept_any_status=_env_bool("SCANNER_ACCEPT_ANY_STATUS", cls.accept_any_status),
            user_agent=os.getenv("SCANNER_USER_AGENT") or cls.user_agent,
            verify_tls=_env_bool("SCANNER_VERIFY_TLS", cls.verify_tls),
        )


LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",")
    if o.strip()
]
