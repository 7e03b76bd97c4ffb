"""
New-todo form validation.

Runs before TodoStore.create; the store itself accepts anything.
"""
from dataclasses import dataclass
from typing import Tuple

TITLE_MIN = 4
DESC_MIN = 6


class FormError(Exception):
    """Raised with a user-facing message for the first invalid field."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


@dataclass
class TodoForm:
    title: str = ""
    desc: str = ""

    def validate(self) -> Tuple[str, str]:
        """
        Trim both fields and check them in order: title, then description.

        Returns:
            (title, desc) ready for TodoStore.create.

        Raises:
            FormError naming the offending field.
        """
        title = (self.title or "").strip()
        desc = (self.desc or "").strip()

        if not title:
            raise FormError("title", "Title is required")
        if len(title) < TITLE_MIN:
            raise FormError("title", f"Title min. {TITLE_MIN} characters.")
        if not desc:
            raise FormError("desc", "Description is required")
        if len(desc) < DESC_MIN:
            raise FormError("desc", f"Description min. {DESC_MIN} characters.")

        return title, desc
