"""
Tests for call_insights/services/aircall_service.py.
"""
from unittest.mock import patch

import aiohttp
import pytest

from call_insights.core.errors import AircallError
from call_insights.schemas.aircall import CardRow
from call_insights.services.aircall_service import AircallService

from conftest import build_mock_session

ROWS = [
    CardRow(kind="title", text="Jane Doe", link="https://app.pipedrive.com/person/42"),
    CardRow(kind="shortText", label="Deal stage", text="Negotiation"),
]


def _make_service() -> AircallService:
  return AircallService(api_id="id", api_token="secret", api_url="https://api.aircall.io/v1")


class TestSendInsightCard:

  async def test_posts_contents_with_basic_auth(self):
    session = build_mock_session(status=201)
    with patch("aiohttp.ClientSession", return_value=session) as session_cls:
      await _make_service().send_insight_card("C1", ROWS)

    assert session_cls.call_args.kwargs["auth"] == aiohttp.BasicAuth("id", "secret")
    session.post.assert_awaited_once_with(
        "https://api.aircall.io/v1/calls/C1/insight_cards",
        json={"contents": [
            {"type": "title", "text": "Jane Doe", "link": "https://app.pipedrive.com/person/42"},
            {"type": "shortText", "label": "Deal stage", "text": "Negotiation"},
        ]},
    )

  async def test_rejected_card_raises(self):
    session = build_mock_session(status=404, text='{"error":"Not found"}')
    with patch("aiohttp.ClientSession", return_value=session):
      with pytest.raises(AircallError) as exc_info:
        await _make_service().send_insight_card("C404", ROWS)

    assert exc_info.value.status == 404
    assert exc_info.value.path == "/calls/C404/insight_cards"
