"""Status change notification channels"""
from .base import StatusChangeNotifier
from .factory import NotifierFactory, get_status_notifier
from .logging_notifier import LoggingStatusNotifier
from .null_notifier import NullStatusNotifier

__all__ = [
    'StatusChangeNotifier',
    'NotifierFactory',
    'get_status_notifier',
    'LoggingStatusNotifier',
    'NullStatusNotifier',
]
