from flask import Blueprint, current_app, jsonify, request

from dailytask.errors import ValidationFailure
from dailytask.models.task_model import TaskDay
from dailytask.stores.task_store import TaskStore
from dailytask.utils.auth import require_identity
from dailytask.utils.db import get_db
from dailytask.utils.normalize import is_valid_date_key, normalize_summary, normalize_tasks


tasks_bp = Blueprint("tasks", __name__)


def _checked_date(date):
    if not is_valid_date_key(date):
        raise ValidationFailure("Invalid date format. Use YYYY-MM-DD")
    return date


@tasks_bp.get("/<date>")
def get_tasks(date):
    identity = require_identity()
    date = _checked_date(date)

    day = TaskStore(get_db()).get(identity.user_id, date)
    if day is None:
        day = TaskDay.empty(identity.user_id, date)
    current_app.logger.info("Loaded tasks user=%s date=%s count=%d", identity.user_id, date, len(day.tasks))
    return jsonify(day.to_dict()), 200


@tasks_bp.post("/<date>")
def save_tasks(date):
    identity = require_identity()
    date = _checked_date(date)

    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationFailure("Invalid tasks data", details="body must be a JSON object")
    tasks = normalize_tasks(payload.get("tasks"))
    summary = normalize_summary(payload.get("summary"))

    day = TaskStore(get_db()).upsert(identity.user_id, date, tasks, summary)
    current_app.logger.info("Saved tasks user=%s date=%s count=%d", identity.user_id, date, len(tasks))
    return jsonify(message="Tasks saved successfully", **day.to_dict()), 200
