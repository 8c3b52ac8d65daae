# 📄 File: harvest_hub/shared/utils/helpers.py
# 🧭 Purpose (Layman Explanation):
# Small everyday tools used by many parts of the app: getting the current time,
# reading stored dates, and working out which fields a user really wants to change.
# 🧪 Purpose (Technical Summary):
# Timestamp helpers and partial-update merging for request payloads.
# 🔗 Dependencies:
# pydantic BaseModel, datetime
# 🔄 Connected Modules / Calls From:
# Garden, crop and user route handlers; profile statistics

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional

from pydantic import BaseModel


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    """Current UTC time as an ISO 8601 string, the format stored in timestamp columns."""
    return utc_now().isoformat()


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a stored timestamp into an aware datetime.

    Naive values are treated as UTC. Returns None for empty or unparseable input.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def merge_update(payload: BaseModel, keep_on_falsy: Iterable[str] = ()) -> Dict[str, Any]:
    """
    Build the column values for a partial update.

    Only keys present in the request body are returned. Fields listed in
    keep_on_falsy are dropped when their supplied value is falsy, so the
    stored value is kept; every other supplied field is written as given,
    including null.
    """
    values = payload.model_dump(mode="json", exclude_unset=True)
    for name in keep_on_falsy:
        if name in values and not values[name]:
            values.pop(name)
    return values
