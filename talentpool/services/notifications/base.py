"""
Status change notifier interface
Called synchronously by the application service after a status update commits
"""
from abc import ABC, abstractmethod
from typing import Optional

from talentpool.models.job_application import JobApplication


class StatusChangeNotifier(ABC):
    """Base class for status change notification channels"""

    @abstractmethod
    async def status_changed(
        self,
        application: JobApplication,
        previous_status: Optional[str],
    ) -> None:
        """
        React to an application moving to a new status

        Args:
            application: The application, already holding its new status
            previous_status: Status before the update
        """

    @property
    @abstractmethod
    def name(self) -> str:
        """Notifier name"""
