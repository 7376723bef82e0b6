"""Config loader from env + yaml."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
import os
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field

from sifter.core.errors import ConfigError
from sifter.domain.scoring import MetricWeight
from sifter.domain.verification import ModeThresholds
from sifter.scoring.weights import DEFAULT_METRIC_WEIGHTS, build_weight_table, validate_weights
from sifter.verification.thresholds import DEFAULT_MODE_THRESHOLDS, build_mode_table

PACKAGE_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_CONFIG_PATH = PACKAGE_ROOT / "config" / "defaults.yaml"


class AppConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    reject_threshold: int = Field(default=75, ge=0, le=100)
    flag_threshold: int = Field(default=40, ge=0, le=100)
    display_reject_threshold: int = Field(default=70, ge=0, le=100)
    batch_max_projects: int = Field(default=100, gt=0)
    concurrent_checks: bool = Field(default=False)
    log_level: str = Field(default="INFO")
    metric_weights: tuple[MetricWeight, ...] = Field(default=DEFAULT_METRIC_WEIGHTS)
    modes: dict[str, ModeThresholds] = Field(default_factory=lambda: dict(DEFAULT_MODE_THRESHOLDS))
    default_config_path: str = Field(default=str(DEFAULT_CONFIG_PATH))


def load_yaml(path: str | Path) -> dict[str, Any]:
    p = Path(path)
    if not p.exists():
        return {}
    try:
        payload = yaml.safe_load(p.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Cannot parse config file {p}: {exc}") from exc
    return payload if isinstance(payload, dict) else {}


def _pick_env(name: str, fallback: Any) -> Any:
    value = os.getenv(name)
    return value if value not in (None, "") else fallback


def _parse_int(raw: Any, fallback: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return fallback
    return value if value >= 0 else fallback


def _parse_bool(raw: Any, fallback: bool) -> bool:
    if isinstance(raw, bool):
        return raw
    if raw is None:
        return fallback
    value = str(raw).strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    return fallback


def _parse_str(raw: Any, fallback: str) -> str:
    value = str(raw if raw is not None else "").strip()
    return value or fallback


def _resolve_default_config_path(path: str | Path | None) -> Path:
    if path is not None:
        return Path(path)
    env_default_path = os.getenv("SIFTER_CONFIG_PATH")
    if env_default_path:
        return Path(env_default_path)
    return DEFAULT_CONFIG_PATH


def load_config(path: str | Path | None = None) -> tuple[AppConfig, dict[str, Any]]:
    default_path = _resolve_default_config_path(path)
    merged = load_yaml(default_path)

    weights = build_weight_table(merged.get("metric_weights"))
    validate_weights(weights)
    modes = build_mode_table(merged.get("modes"))

    payload = {
        "reject_threshold": _parse_int(
            _pick_env("SIFTER_REJECT_THRESHOLD", merged.get("reject_threshold", 75)),
            75,
        ),
        "flag_threshold": _parse_int(
            _pick_env("SIFTER_FLAG_THRESHOLD", merged.get("flag_threshold", 40)),
            40,
        ),
        "display_reject_threshold": _parse_int(
            _pick_env("SIFTER_DISPLAY_REJECT_THRESHOLD", merged.get("display_reject_threshold", 70)),
            70,
        ),
        "batch_max_projects": _parse_int(
            _pick_env("SIFTER_BATCH_MAX_PROJECTS", merged.get("batch_max_projects", 100)),
            100,
        ),
        "concurrent_checks": _parse_bool(
            _pick_env("SIFTER_CONCURRENT_CHECKS", merged.get("concurrent_checks", False)),
            False,
        ),
        "log_level": _parse_str(
            _pick_env("SIFTER_LOG_LEVEL", merged.get("log_level", "INFO")),
            "INFO",
        ).upper(),
        "metric_weights": weights,
        "modes": modes,
        "default_config_path": str(default_path),
    }

    if payload["flag_threshold"] >= payload["display_reject_threshold"]:
        raise ConfigError("flag_threshold must be lower than display_reject_threshold.")

    try:
        cfg = AppConfig.model_validate(payload)
    except ValueError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
    return cfg, merged


@lru_cache(maxsize=1)
def get_settings() -> AppConfig:
    """Return the process-wide configuration, loaded once."""

    cfg, _ = load_config()
    return cfg
