"""Configuration settings for Si Core."""

import os
from pathlib import Path

# Paths
DATA_DIR = Path(os.environ.get("SI_DATA_DIR", Path.home() / ".si")).expanduser()
MODELS_DIR = DATA_DIR / "models"
CATALOG_FILENAME = "model_index.json"

# Seconds to wait for the catalog write lock
CATALOG_LOCK_TIMEOUT = 30

# Logging
LOG_LEVEL = os.environ.get("SI_LOG_LEVEL", "INFO")


def resolve_hf_cache_dir() -> Path:
    """Resolve the Hugging Face hub cache directory.

    Resolution order:
    1. HF_HUB_CACHE environment variable
    2. HF_HOME environment variable + /hub
    3. Default ~/.cache/huggingface/hub
    """
    hf_hub_cache = os.environ.get("HF_HUB_CACHE")
    if hf_hub_cache:
        return Path(hf_hub_cache).expanduser()

    hf_home = os.environ.get("HF_HOME")
    if hf_home:
        return Path(hf_home).expanduser() / "hub"

    return Path.home() / ".cache" / "huggingface" / "hub"


HF_CACHE_DIR = resolve_hf_cache_dir()

# Server
HOST = "127.0.0.1"
PORT = 7879

# API
API_PREFIX = "/api"
API_VERSION = "0.1.0"
