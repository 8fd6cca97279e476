from __future__ import annotations
import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

_TRUE = {"1", "true", "yes", "on"}
DEFAULT_GEOJSON_STEPS = 64


@dataclass(frozen=True)
class Settings:
    phase2_enabled: bool = True
    log_level: str = "INFO"
    geojson_steps: int = DEFAULT_GEOJSON_STEPS


def _geojson_steps(raw: str) -> int:
    try:
        steps = int(raw)
    except ValueError:
        logger.warning("[config.geojson_steps] invalid IMPACT_GEOJSON_STEPS=%r; using %d", raw, DEFAULT_GEOJSON_STEPS)
        steps = DEFAULT_GEOJSON_STEPS
    return max(8, min(steps, 512))


def load_settings() -> Settings:
    """Read IMPACT_* variables, after pulling a local .env into the environment."""
    load_dotenv()
    return Settings(
        phase2_enabled=os.getenv("IMPACT_PHASE2_ENABLED", "true").strip().lower() in _TRUE,
        log_level=os.getenv("IMPACT_LOG_LEVEL", "INFO").strip().upper(),
        geojson_steps=_geojson_steps(os.getenv("IMPACT_GEOJSON_STEPS", str(DEFAULT_GEOJSON_STEPS)).strip()),
    )


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
