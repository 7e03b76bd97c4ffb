# todoboard: kanban-style todo board with a local store and drag-driven status changes
#
# Components:
#   schema.py   - Data model (Todo, TodoStatus, STATUS_COLOR)
#   storage.py  - Local storage backends (SQLite, in-memory)
#   store.py    - TodoStore: create, re-categorize, query by status, purge trash
#   layout.py   - Board view model (cards, drop zones)
#   drag.py     - Drag controller state machine and anchor resolution
#   forms.py    - New-todo form validation
#   config.py   - YAML configuration and logging setup
#   server.py   - Flask JSON API

__version__ = "1.0.0"
