"""
Profile statistics computed in-process from a user's crop rows.

Crop counts and progress averages feed the public profile; the sharing
impact figures (produce shared, neighbours helped, CO2 saved) feed the
current user's profile and the impact endpoint.
"""

import math
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Mapping, Optional

from harvest_hub.shared.utils.helpers import parse_timestamp, utc_now

HARVEST_STATUS = "harvest"

IMPACT_WINDOW_DAYS = 30

# Conversion factors to kilograms; unknown units contribute nothing
KG_PER_UNIT = {
    "kg": 1.0,
    "kgs": 1.0,
    "kilogram": 1.0,
    "kilograms": 1.0,
    "g": 0.001,
    "gram": 0.001,
    "grams": 0.001,
    "lb": 0.45359237,
    "lbs": 0.45359237,
    "pound": 0.45359237,
    "pounds": 0.45359237,
    "oz": 0.028349523125,
    "ounce": 0.028349523125,
    "ounces": 0.028349523125,
}


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def crop_stats(crops: Iterable[Mapping[str, Any]]) -> Dict[str, int]:
    """Total, active (not harvested), shared counts and average progress."""
    crops = list(crops)
    total = len(crops)
    active = sum(1 for crop in crops if crop.get("status") != HARVEST_STATUS)
    shared = sum(1 for crop in crops if crop.get("is_shared"))
    avg_progress = (
        round_half_up(sum(crop.get("progress") or 0 for crop in crops) / total) if total else 0
    )
    return {
        "totalCrops": total,
        "activeCrops": active,
        "sharedCrops": shared,
        "avgProgress": avg_progress,
    }


def quantity_in_kg(crop: Mapping[str, Any]) -> float:
    unit = (crop.get("quantity_unit") or "").strip().lower()
    factor = KG_PER_UNIT.get(unit)
    if factor is None:
        return 0.0
    try:
        return float(crop.get("quantity") or 0) * factor
    except (TypeError, ValueError):
        return 0.0


def sharing_impact(crops: Iterable[Mapping[str, Any]], co2_per_kg: float) -> Dict[str, float]:
    """Impact of the shared crops among `crops`."""
    shared = [crop for crop in crops if crop.get("is_shared")]
    shared_kg = sum(quantity_in_kg(crop) for crop in shared)
    return {
        "sharedKg": round(shared_kg, 1),
        "helpedCount": len(shared),
        "savedCO2": round(shared_kg * co2_per_kg, 1),
    }


def sharing_impact_with_changes(
    crops: Iterable[Mapping[str, Any]],
    co2_per_kg: float,
    now: Optional[datetime] = None,
    window_days: int = IMPACT_WINDOW_DAYS,
) -> Dict[str, float]:
    """
    Impact totals plus the part contributed by crops created within the
    last `window_days` days.
    """
    crops = list(crops)
    cutoff = (now or utc_now()) - timedelta(days=window_days)

    recent: List[Mapping[str, Any]] = []
    for crop in crops:
        created = parse_timestamp(crop.get("created_at"))
        if created is not None and created >= cutoff:
            recent.append(crop)

    totals = sharing_impact(crops, co2_per_kg)
    changes = sharing_impact(recent, co2_per_kg)
    return {
        **totals,
        "sharedChange": changes["sharedKg"],
        "helpedChange": changes["helpedCount"],
        "savedChange": changes["savedCO2"],
    }
