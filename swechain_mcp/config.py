"""Shared configuration loader for the swechain MCP server."""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml


class ConfigurationError(RuntimeError):
    """Raised when configuration is invalid."""


DEFAULT_CONFIG_PATH = Path.home() / ".swechain-mcp.yaml"


@dataclass(frozen=True)
class ServerConfig:
    """Settings shared by every tool call.

    The values are read once at startup and never mutated, so handlers running
    concurrently can share a single instance.
    """

    binary: str = "swechaind"
    chain_id: str = "swechain"
    keyring_backend: str = "test"
    fees: str = "200token"
    denom: str = "token"
    command_timeout: float = 30.0
    allow_key_creation: bool = False

    def tx_flags(self, sender: str) -> list[str]:
        """Flags appended to every state-changing ``tx`` command."""

        return [
            "--from",
            sender,
            "--keyring-backend",
            self.keyring_backend,
            "--chain-id",
            self.chain_id,
            "--fees",
            self.fees,
            "--yes",
            "--output",
            "json",
        ]


def _load_config_file(path: Path, *, required: bool) -> dict[str, Any]:
    if not path.exists():
        if required:
            raise ConfigurationError(f"Config file not found: {path}")
        return {}

    try:
        loaded = yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as exc:  # pragma: no cover - delegated to PyYAML
        raise ConfigurationError(f"Invalid YAML in config file {path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise ConfigurationError(f"Expected {path} to contain a YAML object with a 'chain' section")
    return loaded


def _coerce_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "y", "on"}:
            return True
        if normalized in {"0", "false", "no", "n", "off"}:
            return False
    return None


def _coerce_timeout(raw: Any, *, source: str) -> float | None:
    if raw is None:
        return None
    try:
        timeout = float(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid command timeout in {source}: {raw}") from exc
    if timeout <= 0:
        raise ConfigurationError(f"Command timeout in {source} must be positive: {raw}")
    return timeout


def _first_value(*values: Any, default: Any = None) -> Any:
    for value in values:
        if value is not None:
            return value
    return default


def load_server_config(
    *,
    config_path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> ServerConfig:
    """Load server configuration from overrides, environment and optional YAML."""

    env_map = os.environ if env is None else env
    explicit_path = config_path is not None
    path = Path(config_path).expanduser() if explicit_path else DEFAULT_CONFIG_PATH

    file_config = _load_config_file(path, required=explicit_path)
    chain_section = file_config.get("chain", {}) or {}
    if not isinstance(chain_section, dict):
        raise ConfigurationError(f"Expected 'chain' to be a mapping in {path}")

    override_map = dict(overrides or {})
    defaults = ServerConfig()

    def _text(name: str, env_name: str) -> str:
        value = _first_value(
            override_map.get(name),
            env_map.get(env_name) or None,
            chain_section.get(name),
            default=getattr(defaults, name),
        )
        text = str(value).strip()
        if not text:
            raise ConfigurationError(f"'{name}' must not be empty")
        return text

    command_timeout = _first_value(
        _coerce_timeout(override_map.get("command_timeout"), source="overrides"),
        _coerce_timeout(env_map.get("SWECHAIN_COMMAND_TIMEOUT"), source="environment"),
        _coerce_timeout(chain_section.get("command_timeout"), source=f"{path} chain.command_timeout"),
        default=defaults.command_timeout,
    )
    allow_key_creation = _first_value(
        _coerce_bool(override_map.get("allow_key_creation")),
        _coerce_bool(env_map.get("SWECHAIN_ALLOW_KEY_CREATION")),
        _coerce_bool(chain_section.get("allow_key_creation")),
        default=defaults.allow_key_creation,
    )

    return ServerConfig(
        binary=_text("binary", "SWECHAIN_BINARY"),
        chain_id=_text("chain_id", "SWECHAIN_CHAIN_ID"),
        keyring_backend=_text("keyring_backend", "SWECHAIN_KEYRING_BACKEND"),
        fees=_text("fees", "SWECHAIN_FEES"),
        denom=_text("denom", "SWECHAIN_DENOM"),
        command_timeout=command_timeout,
        allow_key_creation=bool(allow_key_creation),
    )


def resolve_executable(binary: str) -> str:
    """Return the absolute path of ``binary`` or fail.

    The server cannot do anything useful without the chain client, so callers
    treat this error as fatal at startup.
    """

    resolved = shutil.which(binary)
    if resolved is None:
        raise ConfigurationError(f"{binary} not found in PATH")
    return resolved
