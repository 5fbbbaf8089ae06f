import logging

from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from dailytask.errors import PersistenceFailure
from dailytask.models.task_model import TaskDay
from dailytask.utils.db import utcnow

logger = logging.getLogger(__name__)


class TaskStore:
    """One document per (user, date) in ``task_days``.

    The store is passive: callers hand it normalized ``tasks`` and
    ``summary`` values and it writes them as they are.

    Writes go through a single ``find_one_and_update`` with ``upsert=True``
    against the unique ``(userId, date)`` index, so a save either creates the
    day or replaces both fields of the existing one in one document write.
    """

    def __init__(self, db, clock=utcnow):
        self._days = db.task_days
        self._clock = clock

    def upsert(self, user_id, date, tasks, summary):
        now = self._clock()
        try:
            doc = self._days.find_one_and_update(
                {"userId": user_id, "date": date},
                {
                    "$set": {"tasks": tasks, "summary": summary, "updatedAt": now},
                    "$setOnInsert": {"createdAt": now},
                },
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as exc:
            logger.exception("Saving tasks failed user=%s date=%s", user_id, date)
            raise PersistenceFailure(details=str(exc)) from exc
        if doc is None:
            raise PersistenceFailure(details="upsert returned no document")
        return TaskDay.from_doc(doc)

    def get(self, user_id, date):
        try:
            doc = self._days.find_one({"userId": user_id, "date": date})
        except PyMongoError as exc:
            logger.exception("Loading tasks failed user=%s date=%s", user_id, date)
            raise PersistenceFailure(details=str(exc)) from exc
        return TaskDay.from_doc(doc) if doc else None
