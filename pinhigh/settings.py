from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from pinhigh.dispersion import IDENTITY, CalibrationState

logger = logging.getLogger(__name__)

DEFAULTS: Dict[str, Any] = {
    "runs": 50,
    "max_attempts": 60,
    "calibration_path": "calibration.json",
    "output_dir": "results",
    "seed": 0,
}

ENV_PREFIX = "PINHIGH_"


def load_settings(overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """DEFAULTS, then PINHIGH_* environment variables, then explicit overrides."""
    values = dict(DEFAULTS)
    for key, default in DEFAULTS.items():
        raw = os.environ.get(ENV_PREFIX + key.upper())
        if raw is None:
            continue
        try:
            values[key] = type(default)(raw)
        except (TypeError, ValueError):
            logger.warning("ignoring %s%s=%r", ENV_PREFIX, key.upper(), raw)
    for key, value in (overrides or {}).items():
        if key in values and value is not None:
            values[key] = value
    return values


# ============================================================
# Calibration persistence
# ============================================================

def load_calibration(path) -> CalibrationState:
    """Read {"dispersionScale", "chipMultScale"}; a missing or unreadable file means identity."""
    try:
        with Path(path).open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except FileNotFoundError:
        return IDENTITY
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("could not read calibration from %s: %s", path, exc)
        return IDENTITY
    if not isinstance(data, dict):
        return IDENTITY
    try:
        return CalibrationState(
            dispersion_scale=float(data.get("dispersionScale", 1.0)),
            chip_multiplier_scale=float(data.get("chipMultScale", 1.0)),
        )
    except (TypeError, ValueError):
        logger.warning("calibration file %s has non-numeric values", path)
        return IDENTITY


def save_calibration(path, state: CalibrationState) -> Path:
    target = Path(path)
    if target.parent and not target.parent.exists():
        target.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "dispersionScale": round(state.dispersion_scale, 6),
        "chipMultScale": round(state.chip_multiplier_scale, 6),
    }
    with target.open("w", encoding="utf-8") as fh:
        json.dump(payload, fh, indent=2)
    return target
