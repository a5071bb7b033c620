# apps/__init__.py

"""
Task Board - Django applications

- core: models, services, permissions and the dashboard/settings pages
- board: board page, task endpoints and realtime WebSockets
"""

__version__ = '0.1.0'
