"""YAML config loader — parses, interpolates env vars, validates, and emits observer events."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from benchmaker.config.domain.config import BenchmakerConfig
from benchmaker.config.domain.observer import ConfigObserver
from benchmaker.config.infrastructure.env_interpolation import (
    collect_missing_vars,
    interpolate,
)
from benchmaker.config.infrastructure.errors import (
    ConfigLoadError,
    ConfigValidationError,
    MissingEnvVarsError,
)

_JUDGE_TEMPERATURE_WARN_THRESHOLD = 0.2


class YamlConfigLoader:
    """Loads, interpolates, validates, and returns a BenchmakerConfig from a YAML file."""

    def __init__(self, observer: ConfigObserver) -> None:
        self._observer = observer

    def load(self, path: Path) -> BenchmakerConfig:
        """
        Load, interpolate, validate, and return a BenchmakerConfig.

        Relative ``suite`` and ``store`` paths are resolved against the
        directory containing the config file.

        Raises:
            ConfigLoadError: if the file is missing or is not valid YAML.
            MissingEnvVarsError: if any ${ENV_VAR} references are unset (all collected first).
            ConfigValidationError: if the schema is violated.
        """
        raw = _parse_yaml(path=path)
        _check_missing_env_vars(raw=raw)
        interpolated = interpolate(raw)
        cfg = _build_config(resolved=interpolated, base_dir=path.parent)
        _emit_warnings(cfg=cfg, observer=self._observer)
        self._observer.config_loaded(name=cfg.name, num_models=len(cfg.models))
        return cfg


def _parse_yaml(path: Path) -> Any:
    try:
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
    except FileNotFoundError as exc:
        raise ConfigLoadError(path=path) from exc
    except yaml.YAMLError as exc:
        raise ConfigLoadError(path=path, reason="invalid YAML") from exc
    if not isinstance(raw, dict):
        raise ConfigLoadError(path=path, reason="top level must be a mapping")
    return raw


def _check_missing_env_vars(raw: Any) -> None:
    """Raise MissingEnvVarsError if any ${ENV_VAR} references in raw are unset."""
    missing = collect_missing_vars(raw)
    if missing:
        raise MissingEnvVarsError(missing)


def _build_config(resolved: Any, base_dir: Path) -> BenchmakerConfig:
    try:
        cfg = BenchmakerConfig.model_validate(resolved)
    except ValidationError as exc:
        raise ConfigValidationError(str(exc)) from exc
    return cfg.model_copy(
        update={
            "suite": _resolve_path(cfg.suite, base_dir),
            "store": _resolve_path(cfg.store, base_dir),
        }
    )


def _resolve_path(path: Path, base_dir: Path) -> Path:
    return path if path.is_absolute() else base_dir / path


def _emit_warnings(cfg: BenchmakerConfig, observer: ConfigObserver) -> None:
    if cfg.judge is None:
        observer.config_judge_missing_warning()
    elif cfg.judge.temperature > _JUDGE_TEMPERATURE_WARN_THRESHOLD:
        observer.config_judge_temperature_warning(cfg.judge.temperature)
