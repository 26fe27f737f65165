"""
Status notifier factory
Selects the notifier named by settings.STATUS_NOTIFIER
"""
from typing import Optional

import structlog

from talentpool.config import settings
from .base import StatusChangeNotifier
from .logging_notifier import LoggingStatusNotifier
from .null_notifier import NullStatusNotifier

logger = structlog.get_logger(__name__)


class NotifierFactory:
    """Factory returning one shared notifier instance per name"""

    _notifiers = {
        'null': NullStatusNotifier,
        'log': LoggingStatusNotifier,
    }

    _instances = {}  # Singleton instances

    @classmethod
    def get_notifier(cls, name: Optional[str] = None) -> StatusChangeNotifier:
        """
        Get notifier instance

        Args:
            name: 'null' or 'log'. If None, uses settings.STATUS_NOTIFIER

        Raises:
            ValueError: If the name is unknown
        """
        if name is None:
            name = settings.STATUS_NOTIFIER

        name = name.lower()
        if name in cls._instances:
            return cls._instances[name]

        notifier_class = cls._notifiers.get(name)
        if notifier_class is None:
            raise ValueError(
                f"Unknown status notifier '{name}'. Available: {', '.join(cls._notifiers)}"
            )

        cls._instances[name] = notifier_class()
        logger.info("status_notifier_initialized", notifier=name)
        return cls._instances[name]


def get_status_notifier() -> StatusChangeNotifier:
    """FastAPI dependency returning the configured notifier"""
    return NotifierFactory.get_notifier()
