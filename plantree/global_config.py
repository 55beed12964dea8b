"""Global configuration storage for plantree.

Stores engine preferences (AI assistance, suggestion model, timings) in
~/.plantree/config.json. Set PLANTREE_HOME to use another directory.
"""

import logging
import os
from pathlib import Path

from pydantic import BaseModel, Field

from plantree.domain.shared.result import Err, Result
from plantree.infrastructure.storage import JsonStorage

logger = logging.getLogger(__name__)

CONFIG_FILE = "config.json"


class EngineConfig(BaseModel):
    """Engine and suggestion settings."""

    ai_mode: bool = True
    suggestion_model: str = Field(default="qwen2.5-coder:7b", min_length=1)
    ollama_host: str = Field(default="http://localhost:11434", pattern=r"^https?://\S+$")
    request_timeout: float = Field(default=20.0, gt=0)
    debounce_ms: int = Field(default=400, ge=0)
    highlight_ms: int = Field(default=300, ge=0)
    min_prefix: int = Field(default=2, ge=1)
    max_children: int = Field(default=7, ge=1)

    model_config = {"validate_assignment": True}


def get_config_dir() -> Path:
    """Get the plantree config directory."""
    override = os.environ.get("PLANTREE_HOME")
    config_dir = Path(override) if override else Path.home() / ".plantree"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_engine_config() -> EngineConfig:
    """Load the engine configuration, falling back to defaults."""
    config_file = get_config_dir() / CONFIG_FILE
    if not config_file.exists():
        return EngineConfig()
    result = JsonStorage().load_model(config_file, EngineConfig)
    if isinstance(result, Err):
        logger.warning(f"Ignoring config: {result.error}")
        return EngineConfig()
    return result.value


def save_engine_config(config: EngineConfig) -> Result[None, str]:
    """Save the engine configuration."""
    return JsonStorage().save_model(get_config_dir() / CONFIG_FILE, config)
