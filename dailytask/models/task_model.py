from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass
class TaskEntry:
    id: str
    startTime: str = ""
    endTime: str = ""
    planTask: str = ""
    actualTask: str = ""
    category: str = "Default"
    duration: float = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "startTime": self.startTime,
            "endTime": self.endTime,
            "planTask": self.planTask,
            "actualTask": self.actualTask,
            "category": self.category,
            "duration": self.duration,
        }


@dataclass
class TaskSummary:
    totalPlannedTime: float = 0
    totalActualTime: float = 0
    efficiency: float = 0
    categories: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalPlannedTime": self.totalPlannedTime,
            "totalActualTime": self.totalActualTime,
            "efficiency": self.efficiency,
            "categories": self.categories,
        }


@dataclass
class TaskDay:
    user_id: str
    date: str  # YYYY-MM-DD
    tasks: List[TaskEntry] = field(default_factory=list)
    summary: TaskSummary = field(default_factory=TaskSummary)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    id: Optional[str] = None

    @classmethod
    def from_doc(cls, doc: Dict[str, Any]) -> "TaskDay":
        summary = doc.get("summary") or {}
        return cls(
            id=str(doc["_id"]) if doc.get("_id") is not None else None,
            user_id=doc["userId"],
            date=doc["date"],
            tasks=[TaskEntry(**entry) for entry in doc.get("tasks") or []],
            summary=TaskSummary(
                totalPlannedTime=summary.get("totalPlannedTime", 0),
                totalActualTime=summary.get("totalActualTime", 0),
                efficiency=summary.get("efficiency", 0),
                categories=summary.get("categories") or {},
            ),
            created_at=doc.get("createdAt"),
            updated_at=doc.get("updatedAt"),
        )

    @classmethod
    def empty(cls, user_id: str, date: str) -> "TaskDay":
        return cls(user_id=user_id, date=date)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "tasks": [entry.to_dict() for entry in self.tasks],
            "summary": self.summary.to_dict(),
        }
