import os
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG: dict = {
    "repo": None,  # owner/name of the repository whose PRs the bot browses
    "base_branch": "main",
    "model": "ollama",
    "ollama_url": "http://localhost:11434",
    "ollama_model": "llama2",
    "openai_model": None,  # None = provider default
    "anthropic_model": None,
    "inference_timeout": None,  # seconds; None = wait indefinitely
    "label_limit": 75,
    "max_diff_chars": 20000,
    "session_ttl_seconds": 900,
    "concurrent_inference": True,
}

SUPPORTED_MODELS = ("ollama", "ollama-chat", "openai", "anthropic")


def load_config(config_path: str = ".reviewbot.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .reviewbot.yml in the current directory
      3. CLI argument overrides
    Environment variables for credentials and endpoints are applied last.
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    # Resolve credentials from environment variables
    config["github_token"] = os.environ.get("GITHUB_TOKEN")
    config["anthropic_api_key"] = os.environ.get("ANTHROPIC_API_KEY")
    config["openai_api_key"] = os.environ.get("OPENAI_API_KEY")

    if os.environ.get("OLLAMA_URL"):
        config["ollama_url"] = os.environ["OLLAMA_URL"]
    if os.environ.get("REVIEWBOT_REPO"):
        config["repo"] = os.environ["REVIEWBOT_REPO"]

    return config
