"""Email notification dispatcher for scheduled scans."""

import logging
from dataclasses import dataclass

import httpx

from complizen.models import Schedule

logger = logging.getLogger(__name__)


@dataclass
class EmailDispatcher:
    """Posts scheduled-scan notifications to the send-email function.

    Calling the dispatcher returns True on a 2xx response. Transport
    errors and error responses are logged and reported as False.
    """

    url: str
    api_key: str = ""
    timeout: float = 10.0

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def build_payload(self, schedule: Schedule) -> dict[str, str]:
        return {
            "to": schedule.email,
            "documentId": schedule.document_id,
            "documentName": schedule.document_name or schedule.document_id,
            "frequency": schedule.frequency.value,
            "template": "compliance-report",
        }

    def __call__(self, schedule: Schedule) -> bool:
        if not self.url:
            logger.error("NOTIFICATION_URL is not set; cannot notify %s", schedule.email)
            return False
        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.post(
                    self.url,
                    json=self.build_payload(schedule),
                    headers=self._headers(),
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Notification for document=%s rejected: HTTP %s",
                schedule.document_id,
                e.response.status_code,
            )
            return False
        except httpx.HTTPError as e:
            logger.warning("Notification for document=%s failed: %s", schedule.document_id, e)
            return False

        logger.info("Notification sent to %s for document=%s", schedule.email, schedule.document_id)
        return True
