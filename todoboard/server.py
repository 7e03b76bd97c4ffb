"""
todoboard server
----------------
Serves the board page and a JSON API over the todo store.

Usage:
    todoboard-server --port 3000
    todoboard-server --db /tmp/board.db --config ./config.yaml

API:
    GET  /                         → board_ui.html (if present)
    GET  /api/board                → { zones, colors, stats }
    GET  /api/todos?status=DONE    → { todos, count }
    POST /api/todos                → body { title, desc }       → 201 { todo }
    POST /api/todos/<id>/status    → body { status }            → { todo | null }
    POST /api/trash/purge          → { purged }
    POST /api/drag/start           → body { todo_id }
    POST /api/drag/over            → body { zone, pointer_y, cards: [{id, top, height}] }
    POST /api/drag/leave           → body { zone }
    POST /api/drag/end
    GET  /health
"""
import argparse
import logging
import os
from pathlib import Path
from typing import List, Optional

from flask import Flask, jsonify, request, abort

from .config import Config, configure_logging
from .drag import DragController, DragState, DragStateError
from .forms import TodoForm, FormError
from .layout import Board, CardElement, DropZone, render_card
from .schema import STATUS_COLOR, InvalidStatusError
from .storage import SQLiteLocalStorage
from .store import TodoStore

logger = logging.getLogger(__name__)

UI_FILENAME = "board_ui.html"


class BoardSession:
    """Store, rendered board and drag controller shared by the request handlers."""

    def __init__(self, store: TodoStore):
        self.store = store
        self.board = Board.from_store(store)
        self.drag = DragController(store, self.board)

    def refresh(self) -> Board:
        """Re-render from the store unless a drag is holding the current layout."""
        if self.drag.state == DragState.IDLE:
            self.board = Board.from_store(self.store)
            self.drag.board = self.board
        return self.board


def _ui_search_paths(config: Config) -> list:
    paths = []
    if config.ui_file:
        paths.append(Path(config.ui_file))
    paths.append(Path(__file__).parent / UI_FILENAME)
    paths.append(Path.cwd() / UI_FILENAME)
    return paths


class PayloadError(ValueError):
    """Raised when a request body is JSON but not an object."""
    pass


def _json_body() -> dict:
    """Request body as a dict. A missing or unparseable body counts as empty."""
    data = request.get_json(force=True, silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise PayloadError(f"JSON body must be an object, got {type(data).__name__}")
    return data


def _place_reported_cards(zone: DropZone, reported: List[CardElement]) -> None:
    """
    Put the cards the page reported into zone, in reported order.

    Reported cards already in the zone take over the slots the reported set
    occupied; newcomers go at the end. Cards the page did not mention keep
    their position and geometry.
    """
    reported_ids = {id(c) for c in reported}
    queue = list(reported)
    placed = []
    for existing in zone.cards:
        if id(existing) in reported_ids:
            placed.append(queue.pop(0))
        else:
            placed.append(existing)
    zone.cards = placed + queue


def _number(value, name: str) -> float:
    if isinstance(value, bool) or value is None:
        raise ValueError(f"{name} must be a number")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number, got: {value!r}") from None


def create_app(config: Optional[Config] = None, store: Optional[TodoStore] = None) -> Flask:
    """Build the Flask app. A store may be injected; otherwise one is opened from config."""
    if config is None:
        config = Config.load()
    if store is None:
        store = TodoStore(
            SQLiteLocalStorage(config.db_path),
            storage_key=config.storage_key,
            seed_title=config.seed_title,
            seed_desc=config.seed_desc,
        )
    store.load()

    app = Flask(__name__)
    board_session = BoardSession(store)
    app.extensions["todoboard"] = board_session

    # ── Errors ───────────────────────────────────────────────────────────────

    @app.errorhandler(FormError)
    def handle_form_error(e: FormError):
        return jsonify({"error": e.message, "field": e.field}), 400

    @app.errorhandler(InvalidStatusError)
    def handle_invalid_status(e: InvalidStatusError):
        logger.warning(f"Rejected request: {e}")
        return jsonify({"error": str(e)}), 400

    @app.errorhandler(PayloadError)
    def handle_payload_error(e: PayloadError):
        return jsonify({"error": str(e)}), 400

    @app.errorhandler(DragStateError)
    def handle_drag_state(e: DragStateError):
        logger.warning(f"Rejected drag event: {e}")
        return jsonify({"error": str(e)}), 409

    # ── Routes ───────────────────────────────────────────────────────────────

    @app.route("/")
    def index():
        for p in _ui_search_paths(config):
            if p.exists():
                return p.read_text(encoding="utf-8")
        abort(404, f"{UI_FILENAME} not found. Place it alongside the todoboard package")

    @app.route("/api/board")
    def api_board():
        board = board_session.refresh()
        return jsonify({
            "zones": board.to_dict(),
            "colors": {status.value: color for status, color in STATUS_COLOR.items()},
            "stats": board_session.store.stats(),
        })

    @app.route("/api/todos", methods=["GET"])
    def api_list_todos():
        status = request.args.get("status")
        if status:
            todos = board_session.store.list_by_status(status)
        else:
            todos = board_session.store.list_all()
        return jsonify({"todos": [t.to_dict() for t in todos], "count": len(todos)})

    @app.route("/api/todos", methods=["POST"])
    def api_create_todo():
        data = _json_body()
        title, desc = TodoForm(
            title=str(data.get("title") or ""),
            desc=str(data.get("desc") or ""),
        ).validate()
        todo = board_session.store.create(title, desc)
        board_session.refresh()
        return jsonify({"todo": todo.to_dict()}), 201

    @app.route("/api/todos/<todo_id>/status", methods=["POST"])
    def api_set_status(todo_id):
        data = _json_body()
        status = data.get("status")
        if not status:
            return jsonify({"error": "status is required"}), 400
        todo = board_session.store.set_status(todo_id, status)
        board_session.refresh()
        return jsonify({"todo": todo.to_dict() if todo else None})

    @app.route("/api/trash/purge", methods=["POST"])
    def api_purge_trash():
        purged = board_session.store.purge_trash()
        board_session.refresh()
        return jsonify({"purged": purged})

    # ── Drag events ──────────────────────────────────────────────────────────

    @app.route("/api/drag/start", methods=["POST"])
    def api_drag_start():
        data = _json_body()
        todo_id = board_session.store.parse_id(data.get("todo_id", ""))
        if todo_id is None:
            return jsonify({"error": "todo_id is required"}), 400

        card = board_session.refresh().find_card(todo_id)
        if card is None:
            return jsonify({"error": f"Todo {todo_id} not on the board"}), 404
        board_session.drag.drag_start(card)
        return jsonify({"todo_id": todo_id, "state": board_session.drag.state.value})

    @app.route("/api/drag/over", methods=["POST"])
    def api_drag_over():
        data = _json_body()
        zone_name = data.get("zone")
        if not zone_name:
            return jsonify({"error": "zone is required"}), 400
        try:
            pointer_y = _number(data.get("pointer_y"), "pointer_y")
            geometry = [
                (int(c["id"]), _number(c.get("top"), "top"), _number(c.get("height"), "height"))
                for c in data.get("cards") or []
            ]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            return jsonify({"error": f"Invalid drag payload: {e}"}), 400

        board = board_session.board
        zone = board.zone_for(zone_name)
        if geometry:
            reported = []
            for card_id, top, height in geometry:
                card = board.find_card(card_id)
                if card is None:
                    todo = board_session.store.get(card_id)
                    if todo is None:
                        continue
                    card = render_card(todo)
                card.top, card.height = top, height
                if any(c is card for c in reported):
                    continue
                if not any(c is card for c in zone.cards):
                    board.detach(card)
                reported.append(card)
            _place_reported_cards(zone, reported)

        result = board_session.drag.drag_over(zone, pointer_y)
        payload = result.to_dict()
        payload["order"] = zone.card_ids()
        return jsonify(payload)

    @app.route("/api/drag/leave", methods=["POST"])
    def api_drag_leave():
        data = _json_body()
        zone_name = data.get("zone")
        if not zone_name:
            return jsonify({"error": "zone is required"}), 400
        board_session.drag.drag_leave(board_session.board.zone_for(zone_name))
        return jsonify({"state": board_session.drag.state.value})

    @app.route("/api/drag/end", methods=["POST"])
    def api_drag_end():
        board_session.drag.drag_end()
        return jsonify({"state": board_session.drag.state.value})

    @app.route("/health")
    def health():
        storage = board_session.store.storage
        return jsonify({
            "status": "ok",
            "db": getattr(storage, "db_path", None),
            "key": board_session.store.storage_key,
        })

    return app


# ── Main ─────────────────────────────────────────────────────────────────────

def main() -> None:
    parser = argparse.ArgumentParser(description="todoboard server")
    parser.add_argument("--host", help="Bind address (default from config: 127.0.0.1)")
    parser.add_argument("--port", type=int, help="Port (default from config: 3000)")
    parser.add_argument("--db", help="Path to board.db (overrides TODOBOARD_DB env var)")
    parser.add_argument("--config", help="Path to config.yaml (overrides TODOBOARD_CONFIG)")
    args = parser.parse_args()

    if args.db:
        os.environ["TODOBOARD_DB"] = args.db

    config = Config.load(args.config)
    if args.host:
        config.host = args.host
    if args.port:
        config.port = args.port

    configure_logging(config.log_level)
    app = create_app(config)

    logger.info(f"Serving board on http://{config.host}:{config.port} (db: {config.db_path})")

    # Requests are handled one at a time: drag events assume a single drag in flight
    app.run(host=config.host, port=config.port, debug=False, threaded=False)


if __name__ == "__main__":
    main()
