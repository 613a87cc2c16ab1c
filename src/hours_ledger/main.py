from __future__ import annotations

import importlib
from decimal import Decimal

from dotenv import load_dotenv

from .config import get_settings_module
from .container import Container, build_container
from .core.enums import RecordSource
from .logging_config import configure_logging, get_logger

logger = get_logger(__name__)


def build_from_env() -> Container:
    """Load .env, pick the settings module from APP_ENV and wire services."""
    load_dotenv(override=False)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(level=getattr(settings, "LOG_LEVEL", "INFO"))

    db_config = getattr(settings, "DB_CONFIG")
    if getattr(settings, "DEBUG", False):
        logger.debug(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

    return build_container(
        db_config=db_config,
        default_target_hours=Decimal(str(getattr(settings, "DEFAULT_TARGET_HOURS", "200"))),
        completion_source=RecordSource(getattr(settings, "COMPLETION_SOURCE", "self")),
    )
