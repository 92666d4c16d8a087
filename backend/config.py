"""Runtime settings read from the environment (and an optional .env file)."""

import os
import re
from dataclasses import dataclass, field
from typing import Mapping, Optional

from dotenv import load_dotenv

from analysis import AngleRange


@dataclass(frozen=True)
class Settings:
    pose_model: str = "movenet"
    score_threshold: float = 0.0
    enable_tracking: bool = False
    render_3d: bool = False
    line_width: int = 2
    keypoint_radius: int = 4
    flip_horizontal: bool = False
    left_arm_range: AngleRange = field(default_factory=lambda: AngleRange(15, 100))
    right_arm_range: AngleRange = field(default_factory=lambda: AngleRange(15, 100))
    in_range_color: str = "#008000"
    out_of_range_color: str = "#0000ff"
    port: int = 8001


def _parse_bool(key: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off", ""):
        return False
    raise ValueError(f"{key} must be a boolean, got {raw!r}")


def _parse_number(key: str, raw: str, kind=float):
    try:
        return kind(raw)
    except ValueError:
        raise ValueError(f"{key} must be a {kind.__name__}, got {raw!r}") from None


CSS_COLOR_NAMES = {
    "black": "#000000",
    "white": "#ffffff",
    "red": "#ff0000",
    "green": "#008000",
    "lime": "#00ff00",
    "blue": "#0000ff",
    "yellow": "#ffff00",
    "orange": "#ffa500",
    "purple": "#800080",
    "gray": "#808080",
}

_HEX_COLOR = re.compile(r"#[0-9a-f]{6}")


def _parse_color(key: str, raw: str) -> str:
    """Normalise a color to lowercase '#rrggbb'; basic CSS names are accepted."""
    value = raw.strip().lower()
    value = CSS_COLOR_NAMES.get(value, value)
    if not _HEX_COLOR.fullmatch(value):
        raise ValueError(f"{key} must be '#rrggbb' or a basic color name, got {raw!r}")
    return value


def _parse_range(key: str, raw: str) -> AngleRange:
    parts = [p.strip() for p in raw.split(",")]
    if len(parts) != 2:
        raise ValueError(f"{key} must look like 'low,high', got {raw!r}")
    return AngleRange(_parse_number(key, parts[0]), _parse_number(key, parts[1]))


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from environment variables.

    Args:
        env: Mapping to read instead of os.environ (a .env file is only
            loaded when reading the real environment)

    Returns:
        Settings with defaults for anything unset
    """
    if env is None:
        load_dotenv()
        env = os.environ

    defaults = Settings()
    get = env.get
    return Settings(
        pose_model=get("POSE_MODEL", defaults.pose_model).lower(),
        score_threshold=_parse_number("SCORE_THRESHOLD", get("SCORE_THRESHOLD", "0")),
        enable_tracking=_parse_bool("ENABLE_TRACKING", get("ENABLE_TRACKING", "false")),
        render_3d=_parse_bool("RENDER_3D", get("RENDER_3D", "false")),
        line_width=_parse_number("LINE_WIDTH", get("LINE_WIDTH", "2"), int),
        keypoint_radius=_parse_number("KEYPOINT_RADIUS", get("KEYPOINT_RADIUS", "4"), int),
        flip_horizontal=_parse_bool("FLIP_HORIZONTAL", get("FLIP_HORIZONTAL", "false")),
        left_arm_range=_parse_range("LEFT_ARM_RANGE", get("LEFT_ARM_RANGE", "15,100")),
        right_arm_range=_parse_range("RIGHT_ARM_RANGE", get("RIGHT_ARM_RANGE", "15,100")),
        in_range_color=_parse_color(
            "IN_RANGE_COLOR", get("IN_RANGE_COLOR", defaults.in_range_color)
        ),
        out_of_range_color=_parse_color(
            "OUT_OF_RANGE_COLOR", get("OUT_OF_RANGE_COLOR", defaults.out_of_range_color)
        ),
        port=_parse_number("PORT", get("PORT", "8001"), int),
    )
