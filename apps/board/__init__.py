# apps/board/__init__.py

"""
Board - the board page of Task Board

- board (columns) and list views of a board
- task/subtask endpoints used by forms, HTMX and drag-and-drop
- WebSocket consumers for live board updates and notifications
"""
