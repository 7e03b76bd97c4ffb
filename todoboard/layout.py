"""
Board view model: the cards and columns the drag controller rearranges.

Card order inside a zone is visual only and is never persisted. Vertical
geometry (top/height) is whatever the page last reported for each card.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any

from .schema import Todo, TodoStatus, status_color


@dataclass
class CardElement:
    """A rendered todo card."""

    todo_id: int
    title: str
    desc: str
    indicator_color: str
    top: float = 0.0
    height: float = 0.0
    on_drag: bool = False

    @property
    def midpoint(self) -> float:
        return self.top + self.height / 2

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.todo_id,
            "title": self.title,
            "desc": self.desc,
            "indicator_color": self.indicator_color,
            "on_drag": self.on_drag,
        }


def render_card(todo: Todo) -> CardElement:
    """Build the card for a todo, colored by its status."""
    return CardElement(
        todo_id=todo.id,
        title=todo.title,
        desc=todo.desc,
        indicator_color=status_color(todo.status),
    )


@dataclass
class DropZone:
    """
    A column that accepts dropped cards.

    `name` is the zone's declared target status as the page carries it
    (e.g. "in_progress"); it is normalized to a TodoStatus on demand.
    """

    name: str
    cards: List[CardElement] = field(default_factory=list)
    on_hover: bool = False

    @property
    def target_status(self) -> TodoStatus:
        return TodoStatus.parse(self.name)

    def remove(self, card: CardElement) -> None:
        self.cards = [c for c in self.cards if c is not card]

    def insert_before(self, card: CardElement, anchor: Optional[CardElement]) -> None:
        """Place card right before anchor, or at the end when anchor is None."""
        self.remove(card)
        if anchor is None:
            self.cards.append(card)
            return
        for i, existing in enumerate(self.cards):
            if existing is anchor:
                self.cards.insert(i, card)
                return
        self.cards.append(card)

    def card_ids(self) -> List[int]:
        return [c.todo_id for c in self.cards]


class Board:
    """The four status columns."""

    def __init__(self):
        self.zones: Dict[TodoStatus, DropZone] = {
            status: DropZone(name=status.value.lower()) for status in TodoStatus
        }

    @classmethod
    def from_store(cls, store) -> "Board":
        """Render every column from a store snapshot."""
        board = cls()
        for status, zone in board.zones.items():
            zone.cards = [render_card(todo) for todo in store.list_by_status(status)]
        return board

    def zone_for(self, name: str) -> DropZone:
        """Look up a zone by its target-status attribute (case-insensitive)."""
        return self.zones[TodoStatus.parse(name)]

    def find_card(self, todo_id: int) -> Optional[CardElement]:
        for zone in self.zones.values():
            for card in zone.cards:
                if card.todo_id == todo_id:
                    return card
        return None

    def detach(self, card: CardElement) -> None:
        """Remove a card from whichever zone holds it."""
        for zone in self.zones.values():
            zone.remove(card)

    def to_dict(self) -> Dict[str, Any]:
        return {
            status.value: [c.to_dict() for c in zone.cards]
            for status, zone in self.zones.items()
        }
