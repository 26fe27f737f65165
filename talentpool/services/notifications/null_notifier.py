"""Default notifier: does nothing."""
from typing import Optional

from talentpool.models.job_application import JobApplication
from .base import StatusChangeNotifier


class NullStatusNotifier(StatusChangeNotifier):
    """Placeholder until candidates receive real notifications"""

    async def status_changed(
        self,
        application: JobApplication,
        previous_status: Optional[str],
    ) -> None:
        return None

    @property
    def name(self) -> str:
        return "null"
