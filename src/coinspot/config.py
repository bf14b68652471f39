"""Settings loading from YAML and explicit environment overrides."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import ValidationError

from .settings import ClientConfig, Settings

ENV_PREFIX = "COINSPOT_"

# keys and secrets stay opaque strings even when they look numeric
_RAW_FIELDS = {"auth_key", "auth_secret", "base_url", "proxy"}


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}

    loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ValueError(f"Config root must be a mapping, got: {type(loaded)!r}")
    return loaded


def _parse_scalar(raw: str) -> Any:
    try:
        return yaml.safe_load(raw)
    except yaml.YAMLError:
        return raw


def env_overrides(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Collect ``COINSPOT_<FIELD>`` variables.

    ``COINSPOT_ENV`` sets ``env``; every ``ClientConfig`` field maps to
    ``COINSPOT_<FIELD>``, e.g. ``COINSPOT_AUTH_KEY`` sets ``coinspot.auth_key``.
    """
    environ = os.environ if environ is None else environ
    overrides: dict[str, Any] = {}
    client: dict[str, Any] = {}

    if f"{ENV_PREFIX}ENV" in environ:
        overrides["env"] = environ[f"{ENV_PREFIX}ENV"]

    for name in ClientConfig.model_fields:
        raw = environ.get(f"{ENV_PREFIX}{name.upper()}")
        if raw is None:
            continue
        client[name] = raw if name in _RAW_FIELDS else _parse_scalar(raw)

    if client:
        overrides["coinspot"] = client
    return overrides


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load settings from ``config_path`` (or ``COINSPOT_CONFIG``, or ./config.yml).

    Environment overrides win over the file. A missing file means defaults.
    """
    if config_path is None:
        config_path = os.environ.get(f"{ENV_PREFIX}CONFIG", "config.yml")

    data = _read_yaml(Path(config_path))
    overrides = env_overrides()

    client = data.get("coinspot") or {}
    if not isinstance(client, dict):
        raise ValueError(f"'coinspot' section must be a mapping, got: {type(client)!r}")
    if "coinspot" in overrides:
        client = {**client, **overrides.pop("coinspot")}
    data = {**data, **overrides, "coinspot": client}

    try:
        return Settings.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"Invalid configuration: {exc}") from exc
