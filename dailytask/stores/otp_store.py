from datetime import timedelta

from pymongo.errors import PyMongoError

from dailytask.errors import PersistenceFailure
from dailytask.models.user_model import OneTimeCode
from dailytask.utils.db import utcnow


class OtpStore:
    """Short-lived password reset codes.

    The TTL index on ``createdAt`` purges old codes eventually; :meth:`find`
    also filters on age so an expired code is never handed out while it
    waits for the purge.
    """

    def __init__(self, db, ttl_seconds=300, clock=utcnow):
        self._otps = db.otps
        self.ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock

    def put(self, email, code):
        try:
            self._otps.delete_many({"email": email})
            self._otps.insert_one({"email": email, "otp": code, "createdAt": self._clock()})
        except PyMongoError as exc:
            raise PersistenceFailure(details=str(exc)) from exc

    def find(self, email, code):
        query = {
            "email": email,
            "otp": code,
            "createdAt": {"$gt": self._clock() - self.ttl},
        }
        try:
            doc = self._otps.find_one(query)
        except PyMongoError as exc:
            raise PersistenceFailure(details=str(exc)) from exc
        return OneTimeCode.from_doc(doc) if doc else None

    def delete(self, email, code):
        try:
            self._otps.delete_many({"email": email, "otp": code})
        except PyMongoError as exc:
            raise PersistenceFailure(details=str(exc)) from exc
