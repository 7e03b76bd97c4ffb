"""
Todo record schema and status vocabulary.

Board columns:
  TODO → IN_PROGRESS → DONE → TRASH

Any column can be dragged into any other; there is no transition table.
A todo only leaves the board when it sits in TRASH and the trash is purged.
"""
from enum import Enum
from dataclasses import dataclass, replace
from typing import Dict, Any, Union


class InvalidStatusError(ValueError):
    """Raised when a value does not name one of the four board statuses."""
    pass


class TodoStatus(Enum):
    """Board columns a todo can sit in."""
    TODO = "TODO"                  # Freshly created
    IN_PROGRESS = "IN_PROGRESS"    # Being worked on
    DONE = "DONE"                  # Finished, still visible
    TRASH = "TRASH"                # Waiting for a purge

    @classmethod
    def parse(cls, value: Union["TodoStatus", str]) -> "TodoStatus":
        """Accept a member or a case-insensitive name; reject anything else."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise InvalidStatusError(f"Invalid status: {value!r}")
        try:
            return cls[value.strip().upper()]
        except KeyError:
            raise InvalidStatusError(
                f"Invalid status: {value!r}. "
                f"Allowed: {', '.join(s.value for s in cls)}"
            ) from None


# Indicator colors, one per column
STATUS_COLOR: Dict[TodoStatus, str] = {
    TodoStatus.TODO: "#F6E05E",
    TodoStatus.IN_PROGRESS: "#68D391",
    TodoStatus.DONE: "#63B3ED",
    TodoStatus.TRASH: "#F687B3",
}


def status_color(status: Union[TodoStatus, str]) -> str:
    """Indicator color for a status. Unknown statuses raise InvalidStatusError."""
    return STATUS_COLOR[TodoStatus.parse(status)]


@dataclass
class Todo:
    """A single card on the board."""

    id: int
    title: str
    desc: str
    status: TodoStatus = TodoStatus.TODO

    def copy(self) -> "Todo":
        return replace(self)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the persisted/JSON shape."""
        return {
            "id": self.id,
            "title": self.title,
            "desc": self.desc,
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Todo":
        """Deserialize from dict. Missing fields raise KeyError, bad status InvalidStatusError."""
        todo_id = data["id"]
        if isinstance(todo_id, bool) or not isinstance(todo_id, int) or todo_id < 1:
            raise ValueError(f"Invalid todo id: {todo_id!r}")
        for name in ("title", "desc"):
            if not isinstance(data[name], str):
                raise ValueError(f"Todo {name} must be text, got: {data[name]!r}")
        return cls(
            id=todo_id,
            title=data["title"],
            desc=data["desc"],
            status=TodoStatus.parse(data["status"]),
        )
