# apps/board/apps.py

import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class BoardConfig(AppConfig):
    """Board app config"""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.board'
    verbose_name = 'Board'

    def ready(self):
        """
        Connects the signals that broadcast model changes to board groups
        """
        from . import signals  # noqa: F401

        logger.info("🔌 Board app ready - realtime broadcasts enabled")
