"""Tests for configuration loading."""

import pytest

from reviewbot_core.config import SUPPORTED_MODELS, load_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ("OLLAMA_URL", "REVIEWBOT_REPO", "GITHUB_TOKEN", "ANTHROPIC_API_KEY", "OPENAI_API_KEY"):
        monkeypatch.delenv(var, raising=False)


def test_defaults_applied_when_no_config_file(tmp_path):
    config = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    assert config["model"] == "ollama"
    assert config["ollama_url"] == "http://localhost:11434"
    assert config["ollama_model"] == "llama2"
    assert config["base_branch"] == "main"
    assert config["label_limit"] == 75
    assert config["repo"] is None
    assert config["concurrent_inference"] is True


def test_default_model_is_supported():
    assert load_config(config_path="nonexistent.yml")["model"] in SUPPORTED_MODELS


def test_config_file_overrides_defaults(tmp_path):
    cfg = tmp_path / ".reviewbot.yml"
    cfg.write_text("model: openai\nbase_branch: develop\nlabel_limit: 40\n")
    config = load_config(config_path=str(cfg))
    assert config["model"] == "openai"
    assert config["base_branch"] == "develop"
    assert config["label_limit"] == 40


def test_empty_config_file_keeps_defaults(tmp_path):
    cfg = tmp_path / ".reviewbot.yml"
    cfg.write_text("")
    config = load_config(config_path=str(cfg))
    assert config["model"] == "ollama"


def test_cli_overrides_config_file(tmp_path):
    cfg = tmp_path / ".reviewbot.yml"
    cfg.write_text("model: openai\n")
    config = load_config(config_path=str(cfg), cli_overrides={"model": "anthropic"})
    assert config["model"] == "anthropic"


def test_none_cli_overrides_ignored(tmp_path):
    cfg = tmp_path / ".reviewbot.yml"
    cfg.write_text("model: openai\n")
    config = load_config(config_path=str(cfg), cli_overrides={"model": None})
    assert config["model"] == "openai"


def test_env_vars_loaded(monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "gh-token")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "ant-key")
    monkeypatch.setenv("OPENAI_API_KEY", "oai-key")
    config = load_config(config_path="nonexistent.yml")
    assert config["github_token"] == "gh-token"
    assert config["anthropic_api_key"] == "ant-key"
    assert config["openai_api_key"] == "oai-key"


def test_missing_credentials_are_none():
    config = load_config(config_path="nonexistent.yml")
    assert config["github_token"] is None
    assert config["openai_api_key"] is None


def test_ollama_url_env_overrides_file(tmp_path, monkeypatch):
    cfg = tmp_path / ".reviewbot.yml"
    cfg.write_text("ollama_url: http://from-file:11434\n")
    monkeypatch.setenv("OLLAMA_URL", "http://gpu-box:11434")
    config = load_config(config_path=str(cfg))
    assert config["ollama_url"] == "http://gpu-box:11434"


def test_repo_env_var(monkeypatch):
    monkeypatch.setenv("REVIEWBOT_REPO", "acme/widgets")
    assert load_config(config_path="nonexistent.yml")["repo"] == "acme/widgets"


def test_defaults_not_mutated(tmp_path):
    cfg = tmp_path / ".reviewbot.yml"
    cfg.write_text("model: anthropic\n")
    load_config(config_path=str(cfg))
    assert load_config(config_path=str(tmp_path / "nonexistent.yml"))["model"] == "ollama"
