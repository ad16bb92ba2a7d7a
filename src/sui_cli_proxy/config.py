"""Configuration management using TOML + environment variables."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomllib
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore[no-redef]

import tomli_w

CONFIG_DIR = Path.home() / ".sui-cli-proxy"
CONFIG_FILE = CONFIG_DIR / "config.toml"

# Where the installers put the binaries; GUI launches often miss these on PATH.
DEFAULT_EXTRA_PATHS: list[str] = [
    "~/.local/bin",
    "~/.cargo/bin",
    "/usr/local/bin",
    "/opt/homebrew/bin",
]


@dataclass
class ToolsConfig:
    sui: str = "sui"
    walrus: str = "walrus"
    extra_paths: list[str] = field(default_factory=lambda: list(DEFAULT_EXTRA_PATHS))


@dataclass
class RunnerConfig:
    timeout: int = 0  # seconds, 0 = wait forever
    max_output: int = 10 * 1024 * 1024  # characters, 0 = unlimited


@dataclass
class SessionConfig:
    cache_size: int = 32


@dataclass
class LoggingConfig:
    level: str = "WARNING"
    file: str = "~/.sui-cli-proxy/proxy.log"


@dataclass
class AppConfig:
    tools: ToolsConfig = field(default_factory=ToolsConfig)
    runner: RunnerConfig = field(default_factory=RunnerConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def ensure_config_dir() -> None:
    """Create config directory with secure permissions."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    os.chmod(CONFIG_DIR, 0o700)


def load_config() -> AppConfig:
    """Load configuration from TOML file with env var overrides."""
    config = AppConfig()

    if CONFIG_FILE.exists():
        with open(CONFIG_FILE, "rb") as f:
            data = tomllib.load(f)

        tools = data.get("tools", {})
        config.tools.sui = tools.get("sui", config.tools.sui)
        config.tools.walrus = tools.get("walrus", config.tools.walrus)
        config.tools.extra_paths = tools.get("extra_paths", config.tools.extra_paths)

        runner = data.get("runner", {})
        config.runner.timeout = runner.get("timeout", config.runner.timeout)
        config.runner.max_output = runner.get("max_output", config.runner.max_output)

        session = data.get("session", {})
        config.session.cache_size = session.get("cache_size", config.session.cache_size)

        logging_cfg = data.get("logging", {})
        config.logging.level = logging_cfg.get("level", config.logging.level)
        config.logging.file = logging_cfg.get("file", config.logging.file)

    # Environment variable overrides
    if env_sui := os.environ.get("SUI_PROXY_SUI_BIN"):
        config.tools.sui = env_sui
    if env_walrus := os.environ.get("SUI_PROXY_WALRUS_BIN"):
        config.tools.walrus = env_walrus
    if env_timeout := os.environ.get("SUI_PROXY_TIMEOUT"):
        config.runner.timeout = int(env_timeout)
    if env_max_output := os.environ.get("SUI_PROXY_MAX_OUTPUT"):
        config.runner.max_output = int(env_max_output)
    if env_cache := os.environ.get("SUI_PROXY_CACHE_SIZE"):
        config.session.cache_size = int(env_cache)
    if env_log_level := os.environ.get("SUI_PROXY_LOG_LEVEL"):
        config.logging.level = env_log_level

    return config


def save_config(config: AppConfig) -> None:
    """Save configuration to TOML file."""
    ensure_config_dir()

    data = {
        "tools": {
            "sui": config.tools.sui,
            "walrus": config.tools.walrus,
            "extra_paths": config.tools.extra_paths,
        },
        "runner": {
            "timeout": config.runner.timeout,
            "max_output": config.runner.max_output,
        },
        "session": {
            "cache_size": config.session.cache_size,
        },
        "logging": {
            "level": config.logging.level,
            "file": config.logging.file,
        },
    }

    with open(CONFIG_FILE, "wb") as f:
        tomli_w.dump(data, f)

    os.chmod(CONFIG_FILE, 0o600)


# Global singleton
_config: AppConfig | None = None


def get_config() -> AppConfig:
    """Get or load the global config singleton."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Reset the global config (for testing)."""
    global _config
    _config = None
