import logging
import threading
from datetime import datetime, timezone

from flask import current_app
from pymongo import ASCENDING, MongoClient
from pymongo.errors import PyMongoError

from dailytask.errors import PersistenceFailure

logger = logging.getLogger(__name__)


def utcnow():
    """Naive UTC timestamp, the form pymongo hands back by default."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class MongoManager:
    """Owns the process-wide MongoDB client.

    Nothing connects until :meth:`ensure_ready` is first called. The first
    caller creates the client and the indexes while holding the lock; callers
    arriving meanwhile block on the lock and then reuse the memoized database.
    A failed attempt is not memoized, so a later request can try again.
    """

    def __init__(
        self,
        uri,
        db_name,
        otp_ttl_seconds=300,
        connect_timeout_ms=5000,
        socket_timeout_ms=10000,
        server_selection_timeout_ms=5000,
        client_factory=MongoClient,
    ):
        self.uri = uri
        self.db_name = db_name
        self.otp_ttl_seconds = otp_ttl_seconds
        self._client_kwargs = {
            "connectTimeoutMS": connect_timeout_ms,
            "socketTimeoutMS": socket_timeout_ms,
            "serverSelectionTimeoutMS": server_selection_timeout_ms,
            # Callers decide whether to resubmit a failed operation
            "retryWrites": False,
            "retryReads": False,
        }
        self._client_factory = client_factory
        self._lock = threading.Lock()
        self._client = None
        self._db = None

    @classmethod
    def from_config(cls, config, client_factory=MongoClient):
        return cls(
            uri=config["MONGO_URI"],
            db_name=config["MONGO_DB_NAME"],
            otp_ttl_seconds=config["OTP_TTL_SECONDS"],
            connect_timeout_ms=config["MONGO_CONNECT_TIMEOUT_MS"],
            socket_timeout_ms=config["MONGO_SOCKET_TIMEOUT_MS"],
            server_selection_timeout_ms=config["MONGO_SERVER_SELECTION_TIMEOUT_MS"],
            client_factory=client_factory,
        )

    @property
    def is_ready(self):
        return self._db is not None

    def ensure_ready(self):
        db = self._db
        if db is not None:
            return db
        with self._lock:
            if self._db is not None:
                return self._db
            client = None
            try:
                client = self._client_factory(self.uri, **self._client_kwargs)
                db = client[self.db_name]
                self._ensure_indexes(db)
            except PyMongoError as exc:
                if client is not None:
                    client.close()
                logger.error("MongoDB connection failed: %s", exc)
                raise PersistenceFailure(details=str(exc)) from exc
            self._client = client
            self._db = db
            logger.info("MongoDB connected db=%s", self.db_name)
            return db

    def _ensure_indexes(self, db):
        db.users.create_index([("email", ASCENDING)], unique=True)
        db.task_days.create_index([("userId", ASCENDING), ("date", ASCENDING)], unique=True)
        db.otps.create_index([("email", ASCENDING)])
        db.otps.create_index([("createdAt", ASCENDING)], expireAfterSeconds=self.otp_ttl_seconds)

    def close(self):
        with self._lock:
            if self._client is not None:
                self._client.close()
            self._client = None
            self._db = None


def init_app(app, client_factory=MongoClient):
    app.extensions["mongo"] = MongoManager.from_config(app.config, client_factory=client_factory)


def get_db():
    return current_app.extensions["mongo"].ensure_ready()
