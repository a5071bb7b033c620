# apps/core/__init__.py

"""
Core - domain of Task Board

Models, the board/task/member/notification services, permissions, and the
dashboard, board settings and profile pages.
"""
