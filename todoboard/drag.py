"""
Drag-and-drop controller.

Lifecycle (one drag at a time):

    IDLE --drag_start--> DRAGGING --drag_over--> HOVERING(zone)
      ^                     ^  |                    |   |
      |                     |  +----drag_end--------+   |
      |                     +-------drag_leave----------+
      +------------------------drag_end-----------------+

Every drag_over commits the zone's status to the store, not only the final
drop. Hovering across a column and leaving it still moves the todo there.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Dict, Any

from .layout import Board, CardElement, DropZone
from .schema import Todo, TodoStatus, status_color
from .store import TodoStore

logger = logging.getLogger(__name__)


class DragStateError(Exception):
    """Raised when a drag event arrives in a state that cannot accept it."""
    pass


class DragState(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    HOVERING = "hovering"


@dataclass
class DropResult:
    """Outcome of one hover event."""

    todo_id: int
    status: TodoStatus
    color: str
    anchor_id: Optional[int]
    todo: Optional[Todo]     # None when the store had no such id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "todo_id": self.todo_id,
            "status": self.status.value,
            "color": self.color,
            "anchor": self.anchor_id,
            "todo": self.todo.to_dict() if self.todo else None,
        }


def closest_card(cards: Iterable[CardElement], pointer_y: float) -> Optional[CardElement]:
    """
    Card the dragged one should be inserted before.

    Distance is pointer_y minus the card's vertical midpoint. Only cards whose
    midpoint is below the pointer (negative distance) qualify, and the one
    nearest to zero wins. None means append at the end.
    """
    best: Optional[CardElement] = None
    best_dist = float("-inf")
    for card in cards:
        dist = pointer_y - card.top - card.height / 2
        if dist < 0 and dist > best_dist:
            best = card
            best_dist = dist
    return best


class DragController:
    """Turns drag gestures over the board into reorders and status changes."""

    def __init__(self, store: TodoStore, board: Board):
        self.store = store
        self.board = board
        self.state = DragState.IDLE
        self.dragged: Optional[CardElement] = None
        self.hovered: Optional[DropZone] = None

    def drag_start(self, card: CardElement) -> None:
        """Mark card as the one being dragged."""
        if self.state != DragState.IDLE:
            raise DragStateError(
                f"Cannot start dragging {card.todo_id}: "
                f"{self.dragged.todo_id if self.dragged else '?'} is already being dragged"
            )
        card.on_drag = True
        self.dragged = card
        self.state = DragState.DRAGGING
        logger.debug(f"Drag started: {card.todo_id}")

    def drag_over(self, zone: DropZone, pointer_y: float) -> DropResult:
        """
        Handle the pointer moving over a zone.

        Recolors the dragged card, commits the zone's status to the store and
        moves the card before the nearest card below the pointer. The card is
        repositioned even when the store does not know its id.
        """
        if self.dragged is None:
            raise DragStateError("drag_over without an active drag")

        card = self.dragged
        status = zone.target_status

        if self.hovered is not None and self.hovered is not zone:
            self.hovered.on_hover = False
        zone.on_hover = True
        self.hovered = zone
        self.state = DragState.HOVERING

        siblings = [c for c in zone.cards if c is not card]
        anchor = closest_card(siblings, pointer_y)

        todo = self.store.set_status(card.todo_id, status)
        card.indicator_color = status_color(status)

        self.board.detach(card)
        zone.insert_before(card, anchor)

        return DropResult(
            todo_id=card.todo_id,
            status=status,
            color=card.indicator_color,
            anchor_id=anchor.todo_id if anchor else None,
            todo=todo,
        )

    def drag_leave(self, zone: DropZone) -> None:
        zone.on_hover = False
        if self.hovered is zone:
            self.hovered = None
            if self.dragged is not None:
                self.state = DragState.DRAGGING

    def drag_end(self) -> None:
        """Finish or abandon the drag. Committed status changes stay."""
        if self.dragged is not None:
            self.dragged.on_drag = False
            logger.debug(f"Drag ended: {self.dragged.todo_id}")
        if self.hovered is not None:
            self.hovered.on_hover = False
        self.dragged = None
        self.hovered = None
        self.state = DragState.IDLE
