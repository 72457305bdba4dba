"""Central configuration loader for pricepath."""

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv

# Project root is the parent of the pricepath/ directory
PROJECT_ROOT = Path(__file__).resolve().parent.parent

load_dotenv(PROJECT_ROOT / ".env")


def load_settings() -> dict:
    """Load settings from configs/settings.yaml (empty dict if absent)."""
    settings_path = PROJECT_ROOT / "configs" / "settings.yaml"
    if not settings_path.exists():
        return {}
    with open(settings_path) as f:
        return yaml.safe_load(f) or {}


SETTINGS = load_settings()


def section(name: str) -> dict:
    """Return a top-level settings block, or {} when it is missing."""
    return SETTINGS.get(name, {}) or {}


# --- API Keys ---
class Keys:
    X_BEARER_TOKEN = os.getenv("X_BEARER_TOKEN", "")
    XAI = os.getenv("XAI_API_KEY", "")
    TWELVE_DATA = os.getenv("TWELVE_DATA_API_KEY", "")


# --- Paths ---
class Paths:
    ROOT = PROJECT_ROOT
    DATA_CACHE = Path(os.getenv("PRICEPATH_CACHE_DIR", PROJECT_ROOT / "data" / "cache"))
