from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass
class User:
    name: str
    email: str
    password: str  # werkzeug hash, never sent to clients
    created_at: str  # YYYY-MM-DD
    id: Optional[str] = None

    @classmethod
    def from_doc(cls, doc: Dict[str, Any]) -> "User":
        return cls(
            id=str(doc["_id"]),
            name=doc.get("name", ""),
            email=doc["email"],
            password=doc["password"],
            created_at=doc.get("createdAt", ""),
        )

    def public_dict(self, include_created: bool = False) -> Dict[str, Any]:
        out = {"id": self.id, "name": self.name, "email": self.email}
        if include_created:
            out["createdAt"] = self.created_at
        return out


@dataclass
class OneTimeCode:
    email: str
    code: str
    created_at: datetime

    @classmethod
    def from_doc(cls, doc: Dict[str, Any]) -> "OneTimeCode":
        return cls(email=doc["email"], code=doc["otp"], created_at=doc["createdAt"])
