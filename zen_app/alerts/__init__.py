"""
Alert collaborators: audio alarms and stage-change notifications.
"""
from .audio import AudioAlertService, ToneAlertService, get_audio_service, shutdown_audio_service
from .notification import LoggingNotificationDisplay, NotificationDisplay

__all__ = [
    "AudioAlertService",
    "ToneAlertService",
    "get_audio_service",
    "shutdown_audio_service",
    "NotificationDisplay",
    "LoggingNotificationDisplay",
]
