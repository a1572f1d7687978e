"""Configuration management for takeflow."""

from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

import yaml

from .exceptions import ConfigError
from .models import TakeflowConfig
from .resolver import ENV_PREFIX, assign, env_layer, resolve_with_precedence

DEFAULT_CONFIG_PATH = Path("~/.takeflow/config.yaml")
_HEADER = "# takeflow configuration file\n# Edit directly or use `takeflow config set`.\n"


class ConfigManager:
    """Own ``~/.takeflow/config.yaml`` and resolve it with env and CLI overrides.

    Attributes:
        config_path: Expanded location of the YAML file.
    """

    def __init__(
        self,
        config_path: Path | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self.config_path = (config_path or DEFAULT_CONFIG_PATH).expanduser()
        self._env = os.environ if env is None else env

    def load(
        self,
        *,
        cli_overrides: Mapping[str, Any] | None = None,
        include_env: bool = True,
        env_overrides: Mapping[str, str] | None = None,
    ) -> TakeflowConfig:
        """Resolve defaults, the config file, ``TAKEFLOW__`` variables and CLI overrides.

        Args:
            cli_overrides: Dotted keys such as ``service.base_url``.
            include_env: Whether environment variables take part.
            env_overrides: Variables to use instead of the process environment.
        """
        self.ensure_exists()
        env = None
        if include_env:
            env = env_layer(self._env if env_overrides is None else env_overrides) or None
        return resolve_with_precedence(
            defaults=TakeflowConfig(),
            file_overrides=self.load_file_overrides(),
            env_overrides=env,
            cli_overrides=cli_overrides,
        )

    def load_file_overrides(self) -> dict[str, Any]:
        """Return the raw mapping stored in the config file, or ``{}`` when absent."""
        if not self.config_path.exists():
            return {}
        try:
            raw = yaml.safe_load(self.config_path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse configuration file: {exc}") from exc
        if raw is None:
            return {}
        if not isinstance(raw, dict):
            raise ConfigError("Configuration file must contain a mapping at the top level.")
        return raw

    def set_value(self, key: str, value: Any) -> Any:
        """Store ``value`` at dotted ``key`` in the file and return the previous value.

        The previous value is the effective one without environment overrides.

        Raises:
            ConfigError: If the updated file would not validate. Nothing is written.
        """
        section, _, field = key.partition(".")
        before = self.load(include_env=False).model_dump(mode="python").get(section)
        previous = before
        if field:
            previous = before.get(field) if isinstance(before, dict) else None

        data = self.load_file_overrides()
        assign(data, key, value)
        resolve_with_precedence(defaults=TakeflowConfig(), file_overrides=data)
        self.save(data)
        return previous

    def save(self, config: TakeflowConfig | Mapping[str, Any]) -> None:
        """Write ``config`` to disk under the generated header."""
        if isinstance(config, TakeflowConfig):
            data = config.model_dump(mode="python")
        else:
            data = dict(config)
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        body = yaml.safe_dump(data, sort_keys=False)
        self.config_path.write_text(f"{_HEADER}# Last updated: {stamp}\n{body}", encoding="utf-8")

    def ensure_exists(self) -> Path:
        """Write the defaults to ``config_path`` on first use and return the path."""
        if not self.config_path.exists():
            self.save(TakeflowConfig())
        return self.config_path


__all__ = [
    "ConfigManager",
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "ENV_PREFIX",
    "TakeflowConfig",
    "resolve_with_precedence",
]
