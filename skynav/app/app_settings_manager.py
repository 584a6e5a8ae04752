from __future__ import annotations
from dataclasses import dataclass, asdict, field
from enum import Enum
from typing import Any, Dict
from PySide6.QtCore import QSettings
import logging
import math

logger = logging.getLogger(__name__)

ORG_DOMAIN = "SkyNav.org"
APP_NAME = "SkyNav"


class RunMode(str, Enum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    VERBOSE = "verbose"

    def __str__(self):
        return self.value
    def __repr__(self):
        return self.value


# ----------------------
# Defaults
# ----------------------
DEFAULTS: Dict[str, Any] = {
    "general": {
        "run_mode": RunMode.PRODUCTION.value,
        "logging_level": "INFO",  # "DEBUG", "INFO", "WARNING", "ERROR"
    },
    "navigation": {
        "initial_fov_deg": 60.0,
        "min_fov_rad": 0.1,
        "max_fov_rad": 2.0,
        "initial_mode": "gesture",  # "gesture", "device_motion"
    },
}

SECTIONS = tuple(DEFAULTS)
_NAV_MODES = ("gesture", "device_motion")

# ---------------------
# Data model
# ---------------------
@dataclass
class GeneralConfig:
    run_mode: RunMode = RunMode.PRODUCTION
    logging_level: str = "INFO"

@dataclass
class NavigationConfig:
    initial_fov_deg: float = 60.0
    min_fov_rad: float = 0.1
    max_fov_rad: float = 2.0
    initial_mode: str = "gesture"

@dataclass
class AppSettingsData:
    general: GeneralConfig = field(default_factory=GeneralConfig)
    navigation: NavigationConfig = field(default_factory=NavigationConfig)

# ----------------------
# Validation
# ----------------------
def _to_float(v: Any) -> float | None:
    try:
        f = float(v)
    except (TypeError, ValueError):
        return None
    return f if math.isfinite(f) else None


def _validate_run_mode(v: Any) -> RunMode:
    if isinstance(v, RunMode):
        return v
    try:
        return RunMode(str(v).strip().lower())
    except ValueError:
        return RunMode(DEFAULTS["general"]["run_mode"])

def _validate_logging_level(v: Any) -> str:
    v = str(v).strip().upper()
    return v if v in ("DEBUG", "INFO", "WARNING", "ERROR") else "INFO"

def _validate_initial_fov(v: Any) -> float:
    f = _to_float(v)
    return f if (f is not None and 0 < f < 180) else DEFAULTS["navigation"]["initial_fov_deg"]

def _validate_fov_bound(v: Any, key: str) -> float:
    f = _to_float(v)
    return f if (f is not None and 0 < f < math.pi) else DEFAULTS["navigation"][key]

def _validate_fov_range(min_rad: Any, max_rad: Any) -> tuple[float, float]:
    lo = _validate_fov_bound(min_rad, "min_fov_rad")
    hi = _validate_fov_bound(max_rad, "max_fov_rad")
    if lo >= hi:
        logger.warning("Inconsistent field of view range (%s, %s); using defaults", lo, hi)
        return DEFAULTS["navigation"]["min_fov_rad"], DEFAULTS["navigation"]["max_fov_rad"]
    return lo, hi

def _validate_nav_mode(v: Any) -> str:
    mode = str(v).strip().lower()
    return mode if mode in _NAV_MODES else DEFAULTS["navigation"]["initial_mode"]


# ---------------------
# AppSettingsManager
# ---------------------
class AppSettingsManager:
    """
    Application settings backed by QSettings.

    DEFAULTS in code form the base layer, QSettings values override them.
    Values are validated on load and fall back to defaults when out of range.
    set_* methods persist to QSettings immediately.
    """
    def __init__(self, org_domain: str = ORG_DOMAIN, app_name: str = APP_NAME):
        self._settings = QSettings(org_domain, app_name)
        self._data = self._load_effective()

    # read
    @property
    def data(self) -> AppSettingsData:
        return self._data

    @property
    def run_mode(self) -> RunMode:
        return self._data.general.run_mode

    @property
    def logging_level(self) -> str:
        return self._data.general.logging_level

    @property
    def initial_fov_deg(self) -> float:
        return self._data.navigation.initial_fov_deg

    @property
    def min_fov_rad(self) -> float:
        return self._data.navigation.min_fov_rad

    @property
    def max_fov_rad(self) -> float:
        return self._data.navigation.max_fov_rad

    @property
    def initial_mode(self) -> str:
        return self._data.navigation.initial_mode

    # write
    def set_run_mode(self, v: str | RunMode) -> None:
        mode = _validate_run_mode(v)
        self._settings.setValue("general/run_mode", mode.value)
        self._data.general.run_mode = mode

    def set_logging_level(self, v: str) -> None:
        level = _validate_logging_level(v)
        self._settings.setValue("general/logging_level", level)
        self._data.general.logging_level = level

    def set_initial_fov_deg(self, v: float) -> None:
        fov = _validate_initial_fov(v)
        self._settings.setValue("navigation/initial_fov_deg", fov)
        self._data.navigation.initial_fov_deg = fov

    def set_fov_range(self, min_rad: float, max_rad: float) -> None:
        """Both bounds are stored together so that min < max always holds."""
        lo, hi = _validate_fov_range(min_rad, max_rad)
        self._settings.setValue("navigation/min_fov_rad", lo)
        self._settings.setValue("navigation/max_fov_rad", hi)
        self._data.navigation.min_fov_rad = lo
        self._data.navigation.max_fov_rad = hi

    def set_initial_mode(self, v: str) -> None:
        mode = _validate_nav_mode(v)
        self._settings.setValue("navigation/initial_mode", mode)
        self._data.navigation.initial_mode = mode

    # Reset
    def reset_all_to_default(self) -> None:
        """Remove every user override."""
        for section in SECTIONS:
            self._settings.remove(section)
        self._data = self._load_effective()

    def reset_section(self, section: str) -> None:
        """Reset one section to its defaults."""
        if section not in SECTIONS:
            raise ValueError(f"Invalid section: {section}")
        self._settings.remove(section)
        self._data = self._load_effective()

    def to_dict(self) -> dict[str, Any]:
        data = {
            "general": asdict(self._data.general),
            "navigation": asdict(self._data.navigation),
        }
        data["general"]["run_mode"] = self._data.general.run_mode.value
        return data

    # ---------- internals ---------------
    def _load_effective(self) -> AppSettingsData:
        """DEFAULTS overridden by QSettings, validated and turned into the model."""
        merged = self._apply_qsettings_overrides(DEFAULTS)
        return self._make_model_from(merged)

    def _apply_qsettings_overrides(self, base: dict[str, Any]) -> dict[str, Any]:
        merged = {}
        for section, defaults in base.items():
            values = dict(defaults)
            for key in defaults:
                v = self._settings.value(f"{section}/{key}", None)
                if v is not None:
                    values[key] = v
            merged[section] = values
        return merged

    def _make_model_from(self, merged: dict[str, Any]) -> AppSettingsData:
        g = merged.get("general", {})
        nav = merged.get("navigation", {})
        lo, hi = _validate_fov_range(
            nav.get("min_fov_rad", DEFAULTS["navigation"]["min_fov_rad"]),
            nav.get("max_fov_rad", DEFAULTS["navigation"]["max_fov_rad"]),
        )
        return AppSettingsData(
            general=GeneralConfig(
                run_mode=_validate_run_mode(g.get("run_mode", DEFAULTS["general"]["run_mode"])),
                logging_level=_validate_logging_level(g.get("logging_level", DEFAULTS["general"]["logging_level"])),
            ),
            navigation=NavigationConfig(
                initial_fov_deg=_validate_initial_fov(nav.get("initial_fov_deg", DEFAULTS["navigation"]["initial_fov_deg"])),
                min_fov_rad=lo,
                max_fov_rad=hi,
                initial_mode=_validate_nav_mode(nav.get("initial_mode", DEFAULTS["navigation"]["initial_mode"])),
            ),
        )
