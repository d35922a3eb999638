"""EmailDispatcher tests."""

from unittest.mock import MagicMock, patch

import httpx

from complizen.models import Frequency, Schedule
from complizen.notifications import EmailDispatcher


def _schedule():
    return Schedule(
        document_id="doc-1",
        document_name="Policy.pdf",
        frequency=Frequency.WEEKLY,
        email="officer@example.com",
    )


def _patched_client(response=None, side_effect=None):
    client = MagicMock()
    client.__enter__.return_value = client
    if side_effect is not None:
        client.post.side_effect = side_effect
    else:
        client.post.return_value = response
    return client


class TestEmailDispatcher:
    def test_success_returns_true(self):
        response = MagicMock()
        client = _patched_client(response)
        dispatcher = EmailDispatcher(url="https://fn.example.com/send-email", api_key="k")

        with patch("complizen.notifications.email_dispatcher.httpx.Client", return_value=client):
            assert dispatcher(_schedule()) is True

        kwargs = client.post.call_args[1]
        assert kwargs["json"]["to"] == "officer@example.com"
        assert kwargs["json"]["frequency"] == "weekly"
        assert kwargs["headers"]["Authorization"] == "Bearer k"

    def test_http_error_returns_false(self):
        request = httpx.Request("POST", "https://fn.example.com/send-email")
        response = MagicMock()
        response.raise_for_status.side_effect = httpx.HTTPStatusError(
            "boom", request=request, response=httpx.Response(500, request=request)
        )
        client = _patched_client(response)
        dispatcher = EmailDispatcher(url="https://fn.example.com/send-email")

        with patch("complizen.notifications.email_dispatcher.httpx.Client", return_value=client):
            assert dispatcher(_schedule()) is False

    def test_transport_error_returns_false(self):
        client = _patched_client(side_effect=httpx.ConnectError("refused"))
        dispatcher = EmailDispatcher(url="https://fn.example.com/send-email")

        with patch("complizen.notifications.email_dispatcher.httpx.Client", return_value=client):
            assert dispatcher(_schedule()) is False

    def test_missing_url_returns_false(self):
        assert EmailDispatcher(url="")(_schedule()) is False

    def test_payload_defaults_name_to_id(self):
        schedule = _schedule()
        schedule.document_name = None

        payload = EmailDispatcher(url="x").build_payload(schedule)

        assert payload["documentName"] == "doc-1"
