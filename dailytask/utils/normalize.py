"""Shape inbound payloads into the documents the stores persist.

Everything here is pure. Defaults that the old schema computed at model
definition time (creation date, entry ids, category) live here so the
stores can stay passive.
"""

import math
import re
import secrets
import time
from datetime import timedelta

from dailytask.errors import ValidationFailure

DATE_KEY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$", re.ASCII)

DEFAULT_CATEGORY = "Default"
TEXT_FIELDS = ("startTime", "endTime", "planTask", "actualTask")
SUMMARY_NUMBERS = ("totalPlannedTime", "totalActualTime", "efficiency")


def is_valid_date_key(value):
    # Month and day ranges only, "2024-02-31" passes
    if not isinstance(value, str) or DATE_KEY_RE.fullmatch(value) is None:
        return False
    month, day = int(value[5:7]), int(value[8:10])
    return 1 <= month <= 12 and 1 <= day <= 31


def normalize_email(email):
    return (email or "").strip().lower()


def normalize_name(name):
    return (name or "").strip()


def creation_date(now, offset_minutes=0):
    """Calendar date of ``now`` (naive UTC) shifted into the reporting zone."""
    return (now + timedelta(minutes=offset_minutes)).strftime("%Y-%m-%d")


def _is_number(value):
    # NaN and Infinity are not representable in JSON responses
    if isinstance(value, bool):
        return False
    return isinstance(value, int) or (isinstance(value, float) and math.isfinite(value))


def _summary_number(name, value):
    if value is None:
        return 0
    if isinstance(value, str):
        try:
            value = int(value)
        except ValueError:
            try:
                value = float(value)
            except ValueError:
                raise ValidationFailure("Invalid summary data", details=f"{name} must be a number") from None
    if isinstance(value, float) and not math.isfinite(value):
        return 0
    if not _is_number(value):
        raise ValidationFailure("Invalid summary data", details=f"{name} must be a number")
    return value


def _text(value):
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def generate_task_id(taken):
    while True:
        candidate = f"{time.time_ns()}-{secrets.token_hex(4)}"
        if candidate not in taken:
            return candidate


def normalize_entry(raw, taken):
    if not isinstance(raw, dict):
        raise ValidationFailure("Invalid tasks data", details="each task must be an object")

    entry_id = raw.get("id")
    if entry_id is None or entry_id == "":
        entry_id = generate_task_id(taken)
    else:
        entry_id = _text(entry_id)
    taken.add(entry_id)

    entry = {"id": entry_id}
    for name in TEXT_FIELDS:
        entry[name] = _text(raw.get(name))
    entry["category"] = _text(raw.get("category")) or DEFAULT_CATEGORY
    duration = raw.get("duration")
    entry["duration"] = duration if _is_number(duration) else 0
    return entry


def normalize_tasks(raw):
    if not isinstance(raw, list):
        raise ValidationFailure("Invalid tasks data", details="tasks must be an array")
    taken = {_text(item.get("id")) for item in raw if isinstance(item, dict) and item.get("id")}
    return [normalize_entry(item, taken) for item in raw]


def normalize_summary(raw):
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValidationFailure("Invalid summary data", details="summary must be an object")
    summary = {}
    for name in SUMMARY_NUMBERS:
        summary[name] = _summary_number(name, raw.get(name))
    categories = raw.get("categories")
    summary["categories"] = categories if isinstance(categories, dict) else {}
    return summary
