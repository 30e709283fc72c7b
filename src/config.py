"""
Centralized configuration with environment variable overrides.

Operator identity, dialogue thresholds and the cooldown window are all
configurable here. The transport credential location is carried through
as an opaque value for the surrounding program.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from src.logging_context import install_correspondent_filter

load_dotenv()

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(name)s] [%(correspondent_id)s] %(levelname)s: %(message)s"


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


@dataclass(frozen=True)
class OperatorConfig:
    """Who runs the account and where the transport keeps its credentials."""

    operator_id: str = os.getenv(
        "OPERATOR_ID", os.getenv("OWNER_NUMBER", "YOUR_NUMBER@s.whatsapp.net")
    )
    owner_name: str = os.getenv("OWNER_NAME", "Yopinto")
    auth_dir: str = os.getenv("AUTH_DIR", "./auth_info")


@dataclass(frozen=True)
class DialogueConfig:
    """Thresholds for reply validation, cooldown and operator control."""

    cooldown_seconds: int = _safe_int("COOLDOWN_SECONDS", "7200")
    max_invalid_replies: int = _safe_int("MAX_INVALID_REPLIES", "3")
    resume_command: str = os.getenv("RESUME_COMMAND", "resume")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    operator: OperatorConfig = field(default_factory=OperatorConfig)
    dialogue: DialogueConfig = field(default_factory=DialogueConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    agent_name: str = os.getenv("AGENT_NAME", "Josephine")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if config.dialogue.cooldown_seconds < 1:
        raise ValueError(
            f"COOLDOWN_SECONDS must be >= 1, got {config.dialogue.cooldown_seconds}"
        )
    if config.dialogue.max_invalid_replies < 1:
        raise ValueError(
            f"MAX_INVALID_REPLIES must be >= 1, got {config.dialogue.max_invalid_replies}"
        )
    if not config.dialogue.resume_command.strip():
        raise ValueError("RESUME_COMMAND must not be empty")
    if not config.operator.operator_id.strip():
        raise ValueError("OPERATOR_ID must not be empty")
    if not isinstance(logging.getLevelName(config.log_level.upper()), int):
        raise ValueError(f"LOG_LEVEL is not a logging level: {config.log_level!r}")


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    for handler in logging.getLogger().handlers:
        install_correspondent_filter(handler)
    logger.info(
        "Configuration loaded for '%s' (operator %s)",
        config.agent_name, config.operator.operator_id,
    )
    return config


# Singleton instance
settings = load_config()
