import logging
import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    log_level: str = "INFO"
    report_dir: str = "reports"
    strict_validation: bool = True
    default_tenant: str = "demo"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {raw!r}")


def load_settings() -> Settings:
    return Settings(
        log_level=os.getenv("CARBONTRACK_LOG_LEVEL", "INFO").upper(),
        report_dir=os.getenv("CARBONTRACK_REPORT_DIR", "reports"),
        strict_validation=_env_bool("CARBONTRACK_STRICT_VALIDATION", True),
        default_tenant=os.getenv("CARBONTRACK_TENANT", "demo"),
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
