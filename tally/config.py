"""Configuration file management for tally.

The TOML file is the only place settings live. ``settings_from_config`` turns
the raw dictionary into an immutable, normalised Settings value that is
passed explicitly to whatever needs it.
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import tomli_w

from tally.dates import parse_clock
from tally.domain.models import (
    DayStartConfig,
    MethodId,
    Money,
    PaymentMethod,
    PaymentType,
    SpeedDialPreset,
)
from tally.domain.payment import SPEED_DIAL_KEYS, ensure_default_method, resolve_selected, validate_amount

logger = structlog.get_logger(__name__)

DEFAULT_REMINDER_TIME = "21:00"


@dataclass(frozen=True)
class Settings:
    """Normalised user settings."""

    day_start: DayStartConfig = field(default_factory=DayStartConfig)
    first_weekday: int = 0
    currency_symbol: str = "$"
    color_theme: str = "default"
    theme_mode: str = "auto"
    reminder_enabled: bool = False
    reminder_hour: int = 21
    reminder_minute: int = 0
    payment_methods: tuple[PaymentMethod, ...] = ()
    selected_payment_method_id: MethodId | None = None
    speed_dial: dict[int, SpeedDialPreset] = field(default_factory=dict)


def get_xdg_config_home() -> Path:
    """Get XDG config directory, with fallback to ~/.config."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config)
    return Path.home() / ".config"


def get_config_path() -> Path:
    """Get the config file path (XDG compliant).

    Returns:
        Path to the config file.
    """
    return get_xdg_config_home() / "tally" / "config.toml"


def default_config() -> dict[str, Any]:
    """Raw configuration written by ``tally init``."""
    return {
        "day_start": "00:00",
        "first_weekday": 0,
        "currency_symbol": "$",
        "color_theme": "default",
        "theme_mode": "auto",
        "reminder": {"enabled": False, "time": DEFAULT_REMINDER_TIME},
    }


def create_default_config(config_path: Path | None = None) -> None:
    """Create default config file with secure permissions.

    Args:
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)
    save_config(default_config(), config_path)


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Configuration dictionary, empty if the file doesn't exist.

    Raises:
        tomllib.TOMLDecodeError: If the file is not valid TOML.
    """
    if config_path is None:
        config_path = get_config_path()

    if not config_path.exists():
        logger.debug("config_missing", config_path=str(config_path))
        return {}

    with open(config_path, "rb") as f:
        return tomllib.load(f)


def save_config(config: dict[str, Any], config_path: Path | None = None) -> None:
    """Save configuration to TOML file.

    Args:
        config: Configuration dictionary.
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "wb") as f:
        tomli_w.dump(config, f)

    os.chmod(config_path, 0o600)


def _clock(value: Any, fallback: str) -> tuple[int, int]:
    """Parse an HH:MM value, clamping numbers and ignoring garbage."""
    if isinstance(value, str):
        hour_text, _, minute_text = value.partition(":")
        try:
            return int(hour_text), int(minute_text or 0)
        except ValueError:
            logger.warning("config_bad_time", value=value)
    return parse_clock(fallback)


def _money(value: Any) -> Money | None:
    amount, _ = validate_amount(str(value))
    return amount


def _typed(config: dict[str, Any], key: str, kind: type, default: Any) -> Any:
    """Value of a key if it has the expected TOML type, else the default."""
    value = config.get(key, default)
    if isinstance(value, kind) and not (kind is int and isinstance(value, bool)):
        return value
    logger.warning("config_bad_value", key=key, value=value)
    return default


def _payment_methods(raw: list[Any]) -> list[PaymentMethod]:
    methods = []
    for item in raw:
        if not isinstance(item, dict) or "id" not in item or "name" not in item:
            continue
        try:
            payment_type = PaymentType(item.get("type", "card"))
        except ValueError:
            payment_type = PaymentType.CARD
        methods.append(
            PaymentMethod(
                id=MethodId(str(item["id"])),
                name=str(item["name"]),
                color_hex=str(item.get("color", "#708090")),
                type=payment_type,
                is_default=bool(item.get("default", False)),
            )
        )
    return methods


def _speed_dial(raw: dict[str, Any]) -> dict[int, SpeedDialPreset]:
    presets = {}
    for key, item in raw.items():
        if not str(key).isdigit() or int(key) not in SPEED_DIAL_KEYS or not isinstance(item, dict):
            continue
        amount = _money(item.get("amount"))
        if amount is not None:
            presets[int(key)] = SpeedDialPreset(amount=amount, label=str(item.get("label", "")))
    return presets


def settings_from_config(config: dict[str, Any]) -> Settings:
    """Build normalised settings from a raw config dictionary.

    Out-of-range values are clamped, unknown payment method selections fall
    back to the default method, and the Cash method is always present.
    """
    day_hour, day_minute = _clock(config.get("day_start"), "00:00")
    reminder = _typed(config, "reminder", dict, {})
    reminder_hour, reminder_minute = _clock(reminder.get("time"), DEFAULT_REMINDER_TIME)
    reminder_time = DayStartConfig.clamped(reminder_hour, reminder_minute)

    methods = ensure_default_method(_payment_methods(_typed(config, "payment_methods", list, [])))

    return Settings(
        day_start=DayStartConfig.clamped(day_hour, day_minute),
        first_weekday=_typed(config, "first_weekday", int, 0) % 7,
        currency_symbol=str(config.get("currency_symbol", "$")),
        color_theme=str(config.get("color_theme", "default")),
        theme_mode=str(config.get("theme_mode", "auto")),
        reminder_enabled=bool(reminder.get("enabled", False)),
        reminder_hour=reminder_time.hour,
        reminder_minute=reminder_time.minute,
        payment_methods=tuple(methods),
        selected_payment_method_id=resolve_selected(methods, config.get("selected_payment_method_id")),
        speed_dial=_speed_dial(_typed(config, "speed_dial", dict, {})),
    )


def settings_to_config(settings: Settings) -> dict[str, Any]:
    """Serialise settings back into the TOML layout."""
    config: dict[str, Any] = {
        "day_start": str(settings.day_start),
        "first_weekday": settings.first_weekday,
        "currency_symbol": settings.currency_symbol,
        "color_theme": settings.color_theme,
        "theme_mode": settings.theme_mode,
        "reminder": {
            "enabled": settings.reminder_enabled,
            "time": f"{settings.reminder_hour:02d}:{settings.reminder_minute:02d}",
        },
        "payment_methods": [
            {
                "id": method.id,
                "name": method.name,
                "color": method.color_hex,
                "type": method.type.value,
                "default": method.is_default,
            }
            for method in settings.payment_methods
        ],
        "speed_dial": {
            str(key): {"amount": str(preset.amount), "label": preset.label}
            for key, preset in sorted(settings.speed_dial.items())
        },
    }
    if settings.selected_payment_method_id is not None:
        config["selected_payment_method_id"] = settings.selected_payment_method_id
    return config


def load_settings(config_path: Path | None = None) -> Settings:
    """Load and normalise settings; a missing file gives defaults."""
    return settings_from_config(load_config(config_path))


def save_settings(settings: Settings, config_path: Path | None = None) -> None:
    """Write settings to the config file."""
    save_config(settings_to_config(settings), config_path)
