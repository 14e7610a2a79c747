"""
Harmoniq Safety - Notifications
"""
from .routes import register_notification_routes
from .scheduler import init_scheduler, shutdown_scheduler

__all__ = ["init_scheduler", "register_notification_routes", "shutdown_scheduler"]
