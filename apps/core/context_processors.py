# apps/core/context_processors.py

from django.conf import settings


def realtime(request):
    """WebSocket client settings used by base.html"""
    return {
        'ws_heartbeat_ms': settings.TASKBOARD_WS_HEARTBEAT_INTERVAL * 1000,
    }
