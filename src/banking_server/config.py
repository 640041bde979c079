"""
Configuration helpers shared by the tools and the agent service.

Settings come from environment variables first (a ``.env`` file is loaded by
the entry points), then from the per-tool ``settings`` blocks of
``banking_server/tools.yaml`` (shipped with the package).
"""

import logging
import os
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / "tools.yaml"


def get_config_path():
    """Return the tools.yaml path, honouring the BANKING_AGENT_CONFIG override."""
    override = os.environ.get("BANKING_AGENT_CONFIG")
    if override:
        return Path(override)
    return DEFAULT_CONFIG_PATH


def load_config(config_path=None):
    """Load the whole YAML config file, or an empty dict if it is missing or broken."""
    config_path = Path(config_path) if config_path else get_config_path()
    if not config_path.exists():
        logger.debug("No config file found at %s", config_path)
        return {}

    try:
        with config_path.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Error loading config from {config_path}: {str(e)}")
        return {}


def load_tool_settings(tool_name, config_path=None):
    """
    Get the ``settings`` block for one named entry of the ``tools`` list.

    Args:
        tool_name (str): Name of the tool entry, e.g. "LLMTool"
        config_path (str, optional): Explicit config file location

    Returns:
        dict: The settings, or an empty dict when the entry does not exist
    """
    config = load_config(config_path)
    for tool in config.get("tools", []) or []:
        if tool.get("name") == tool_name:
            return tool.get("settings", {}) or {}
    return {}


def env_flag(name, default):
    """Read a boolean environment variable such as LLM_ENABLED=false."""
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")
