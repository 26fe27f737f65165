"""Notifier that records each status change as a structured log event."""
from typing import Optional

import structlog

from talentpool.models.job_application import JobApplication
from .base import StatusChangeNotifier

logger = structlog.get_logger(__name__)


class LoggingStatusNotifier(StatusChangeNotifier):

    async def status_changed(
        self,
        application: JobApplication,
        previous_status: Optional[str],
    ) -> None:
        logger.info(
            "application_status_notification",
            application_id=application.id,
            candidate_id=application.user_id,
            job_offer_id=application.job_offer_id,
            previous_status=previous_status,
            status=application.status,
        )

    @property
    def name(self) -> str:
        return "log"
