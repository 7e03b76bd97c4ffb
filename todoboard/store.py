"""
Todo store: the single authority over todo records and their status.

The whole board lives in memory as {id: Todo} and is written back to local
storage as one JSON blob after every mutation:

    {"1": {"id": 1, "title": "...", "desc": "...", "status": "TODO"}, ...}
"""
import json
import logging
from typing import Dict, List, Optional, Union, Any

from .schema import Todo, TodoStatus
from .storage import LocalStorage

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "todo_app"
DEFAULT_SEED_TITLE = "Example Todo"
DEFAULT_SEED_DESC = "This is the description of an example todo."


class CorruptStateError(Exception):
    """Raised when the persisted blob cannot be turned back into a board."""
    pass


class TodoStore:
    """In-memory todo mapping mirrored to a LocalStorage backend."""

    def __init__(
        self,
        storage: LocalStorage,
        storage_key: str = DEFAULT_STORAGE_KEY,
        seed_title: str = DEFAULT_SEED_TITLE,
        seed_desc: str = DEFAULT_SEED_DESC,
    ):
        self.storage = storage
        self.storage_key = storage_key
        self.seed_title = seed_title
        self.seed_desc = seed_desc
        self._todos: Dict[int, Todo] = {}
        self._loaded = False

    # ──────────────────────────────────────────
    # Persistence
    # ──────────────────────────────────────────

    def load(self) -> None:
        """
        Read the board from storage.

        First-ever load (no blob under the key) seeds one example todo and
        saves it. A blob that does not decode raises CorruptStateError and
        leaves the store unloaded.
        """
        raw = self.storage.get_item(self.storage_key)
        if raw is None:
            self._todos = {
                1: Todo(id=1, title=self.seed_title, desc=self.seed_desc),
            }
            self._loaded = True
            self.save()
            logger.info(f"Seeded new board under key '{self.storage_key}'")
            return

        self._todos = self.decode(raw)
        self._loaded = True
        logger.debug(f"Loaded {len(self._todos)} todos from '{self.storage_key}'")

    def save(self) -> None:
        """Write the full board. Storage errors propagate."""
        self.storage.set_item(self.storage_key, json.dumps(self.to_dict()))

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.load()

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        """Persisted layout: stringified id → record dict."""
        return {str(todo_id): todo.to_dict() for todo_id, todo in self._todos.items()}

    @staticmethod
    def decode(raw: str) -> Dict[int, Todo]:
        """Parse a persisted blob into {id: Todo}."""
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CorruptStateError(f"Stored board is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise CorruptStateError(
                f"Stored board must be a JSON object, got {type(data).__name__}"
            )

        todos: Dict[int, Todo] = {}
        for key, value in data.items():
            if not isinstance(value, dict):
                raise CorruptStateError(f"Record {key!r} is not an object")
            try:
                todo = Todo.from_dict(value)
            except (KeyError, ValueError) as e:
                raise CorruptStateError(f"Record {key!r} is invalid: {e}") from e
            if key != str(todo.id):
                raise CorruptStateError(
                    f"Record key {key!r} does not match its id {todo.id}"
                )
            todos[todo.id] = todo
        return todos

    # ──────────────────────────────────────────
    # Operations
    # ──────────────────────────────────────────

    def next_id(self) -> int:
        """One past the highest id in use (1 for an empty board)."""
        self._ensure_loaded()
        return max(self._todos.keys(), default=0) + 1

    def create(self, title: str, desc: str) -> Todo:
        """Insert a new TODO card. Inputs are expected to be validated already."""
        todo_id = self.next_id()
        todo = Todo(id=todo_id, title=title, desc=desc, status=TodoStatus.TODO)
        self._todos[todo_id] = todo
        try:
            self.save()
        except Exception:
            del self._todos[todo_id]
            raise
        logger.info(f"Created todo {todo_id}: {title}")
        return todo.copy()

    def set_status(
        self, todo_id: Union[int, str], status: Union[TodoStatus, str]
    ) -> Optional[Todo]:
        """
        Move a todo to another column and save.

        An unknown id is a silent no-op and returns None. An invalid status
        raises InvalidStatusError before anything is written.
        """
        new_status = TodoStatus.parse(status)
        self._ensure_loaded()
        todo = self._todos.get(self.parse_id(todo_id))
        if todo is None:
            logger.debug(f"set_status ignored: no todo with id {todo_id!r}")
            return None

        previous, todo.status = todo.status, new_status
        try:
            self.save()
        except Exception:
            todo.status = previous
            raise
        logger.debug(f"Todo {todo.id} -> {new_status.value}")
        return todo.copy()

    def list_by_status(self, status: Union[TodoStatus, str]) -> List[Todo]:
        """Copies of every todo in a column, in insertion order."""
        wanted = TodoStatus.parse(status)
        self._ensure_loaded()
        return [t.copy() for t in self._todos.values() if t.status == wanted]

    def list_all(self) -> List[Todo]:
        self._ensure_loaded()
        return [t.copy() for t in self._todos.values()]

    def get(self, todo_id: Union[int, str]) -> Optional[Todo]:
        self._ensure_loaded()
        todo = self._todos.get(self.parse_id(todo_id))
        return todo.copy() if todo else None

    def purge_trash(self) -> int:
        """Permanently delete every TRASH todo. Returns how many were removed."""
        self._ensure_loaded()
        trash = [t.id for t in self._todos.values() if t.status == TodoStatus.TRASH]
        snapshot = dict(self._todos)
        for todo_id in trash:
            del self._todos[todo_id]
        try:
            self.save()
        except Exception:
            self._todos = snapshot
            raise
        if trash:
            logger.info(f"Purged {len(trash)} todos from trash")
        return len(trash)

    def stats(self) -> Dict[str, int]:
        """Count per status plus total."""
        self._ensure_loaded()
        counts = {s.value: 0 for s in TodoStatus}
        for todo in self._todos.values():
            counts[todo.status.value] += 1
        counts["total"] = len(self._todos)
        return counts

    def __len__(self) -> int:
        self._ensure_loaded()
        return len(self._todos)

    @staticmethod
    def parse_id(todo_id: Union[int, str]) -> Optional[int]:
        """Ids arrive as ints or as the numeric strings carried on cards."""
        if isinstance(todo_id, bool):
            return None
        if isinstance(todo_id, int):
            return todo_id
        try:
            return int(str(todo_id).strip())
        except ValueError:
            return None
