import logging

from pymongo.errors import DuplicateKeyError, PyMongoError

from dailytask.errors import DuplicateEmail, PersistenceFailure
from dailytask.models.user_model import User
from dailytask.utils.normalize import normalize_email

logger = logging.getLogger(__name__)


class UserStore:
    """User records keyed by normalized email.

    Uniqueness is enforced by the unique index on ``users.email``; the
    lookup a handler performs before :meth:`create` is only advisory.
    """

    def __init__(self, db):
        self._users = db.users

    def find_by_email(self, email):
        try:
            doc = self._users.find_one({"email": normalize_email(email)})
        except PyMongoError as exc:
            raise PersistenceFailure(details=str(exc)) from exc
        return User.from_doc(doc) if doc else None

    def create(self, name, email, hashed_password, created_date):
        doc = {
            "name": name,
            "email": normalize_email(email),
            "password": hashed_password,
            "createdAt": created_date,
        }
        try:
            res = self._users.insert_one(doc)
        except DuplicateKeyError as exc:
            raise DuplicateEmail() from exc
        except PyMongoError as exc:
            raise PersistenceFailure(details=str(exc)) from exc
        doc["_id"] = res.inserted_id
        return User.from_doc(doc)

    def update_password(self, email, hashed_password):
        try:
            res = self._users.update_one(
                {"email": normalize_email(email)},
                {"$set": {"password": hashed_password}},
            )
        except PyMongoError as exc:
            raise PersistenceFailure(details=str(exc)) from exc
        if res.matched_count == 0:
            logger.info("Password update matched no user")
