import os
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./kendo.db")
SQL_ECHO = _env_flag("SQL_ECHO", "false")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# JSON file with rule presets; the built-in tables are used when unset
RULE_PRESETS_PATH: Optional[str] = os.getenv("RULE_PRESETS_PATH") or None

AUDIT_ENABLED = _env_flag("AUDIT_ENABLED", "true")

CORS_ORIGINS: List[str] = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
_extra = os.getenv("CORS_ORIGINS", "")
if _extra:
    CORS_ORIGINS.extend(o.strip() for o in _extra.split(",") if o.strip())
