"""
Configuration file loading.

Loads ``config.yaml`` (plus an optional ``config.{env}.yaml`` overlay) from
a project directory.
"""

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import yaml

from sqldeploy.config.resolver import resolve_config
from sqldeploy.exceptions import ConfigurationError

DEFAULT_MIGRATIONS = {
    "directory": "migrations",
    "connection": "default",
    "pattern": "*.sql",
    "table": "changelog",
    "verify_change_numbers": True,
}


class Config:
    """sqldeploy configuration container with dict-like access."""

    def __init__(self, data: dict[str, Any]):
        self.data = data
        self.migrations = {**DEFAULT_MIGRATIONS, **(data.get("migrations") or {})}

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation."""
        keys = key.split(".")
        value = self.data
        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default
        return value

    def __getitem__(self, key: str) -> Any:
        """Dict-like access: config['key'] or config['nested.key']."""
        if isinstance(key, str) and "." in key:
            return self.get(key)
        if key in self.data:
            value = self.data[key]
            # Return nested dicts as Config objects for chaining
            if isinstance(value, dict):
                return Config(value)
            return value
        raise KeyError(f"Config key '{key}' not found")

    def __contains__(self, key: str) -> bool:
        """Check if key exists in config."""
        if isinstance(key, str) and "." in key:
            value = self.data
            for k in key.split("."):
                if not isinstance(value, dict) or k not in value:
                    return False
                value = value[k]
            return True
        return key in self.data

    def __iter__(self) -> Iterator[str]:
        """Iterate over top-level keys."""
        return iter(self.data)

    def keys(self):
        return self.data.keys()

    def items(self):
        return self.data.items()

    def migrations_dir(self, project_dir: Path) -> Path:
        """Migrations directory, resolved against the project directory."""
        directory = Path(self.migrations["directory"])
        if not directory.is_absolute():
            directory = project_dir / directory
        return directory

    def validate(self) -> None:
        """Validate configuration structure and content."""
        errors = []

        connections = self.data.get("connections")
        if not isinstance(connections, dict) or not connections:
            errors.append("Configuration must define at least one entry under 'connections'")

        migrations = self.data.get("migrations")
        if migrations is not None and not isinstance(migrations, dict):
            errors.append(f"Configuration 'migrations' must be a mapping, got {type(migrations).__name__}")
        elif isinstance(connections, dict) and connections:
            conn_name = self.migrations["connection"]
            if conn_name not in connections:
                errors.append(
                    f"migrations.connection '{conn_name}' is not defined under 'connections' "
                    f"(available: {', '.join(connections)})"
                )

        if errors:
            raise ConfigurationError("\n".join(errors))


def _read_yaml(path: Path) -> dict[str, Any]:
    """Parse a YAML file into a dict, with a readable error on bad syntax."""
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        if hasattr(e, "problem_mark"):
            mark = e.problem_mark
            raise ConfigurationError(
                f"Error parsing {path.name} at line {mark.line + 1}, column {mark.column + 1}:\n"
                f"  {e}\n"
                f"  File: {path}\n"
                f"  Suggestion: Check YAML syntax, ensure proper indentation and quotes"
            ) from e
        raise ConfigurationError(f"Error parsing {path.name}: {e}\n  File: {path}") from e
    except PermissionError as e:
        raise ConfigurationError(
            f"Permission denied reading {path}\n" f"  Suggestion: Check file permissions"
        ) from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration must be a mapping, got {type(data).__name__}\n  File: {path}")
    return data


def load_config(project_path: Path | None = None, env: str | None = None) -> Config:
    """
    Load sqldeploy configuration.

    Args:
        project_path: Path to project root (default: current directory)
        env: Environment name (dev, staging, prod)

    Returns:
        Config instance with merged configuration

    Raises:
        ConfigurationError: If config.yaml is missing or invalid
    """
    if project_path is None:
        project_path = Path.cwd()

    base_config_path = project_path / "config.yaml"
    if not base_config_path.is_file():
        raise ConfigurationError(
            f"Configuration file not found: {base_config_path}\n"
            f"  Suggestion: Create a config.yaml file in your project root"
        )

    config_data = _read_yaml(base_config_path)

    if env:
        env_config_path = project_path / f"config.{env}.yaml"
        if env_config_path.exists():
            # env overrides base
            _merge_dict(config_data, _read_yaml(env_config_path))

    config_data = resolve_config(config_data, env or "dev")

    return Config(config_data)


def _merge_dict(base: dict, override: dict):
    """Recursively merge override into base."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _merge_dict(base[key], value)
        else:
            base[key] = value
