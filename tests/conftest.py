"""
Test configuration and fixtures.

Required settings are seeded before the application modules are imported.
All outbound Pipedrive and Aircall traffic is mocked.
"""
import os

os.environ.setdefault("PIPEDRIVE_API_TOKEN", "pd-test-token")
os.environ.setdefault("AIRCALL_API_ID", "ac-test-id")
os.environ.setdefault("AIRCALL_API_TOKEN", "ac-test-token")

from unittest.mock import AsyncMock, MagicMock

import pytest

from call_insights.schemas.aircall import CallEvent
from call_insights.schemas.pipedrive import Deal, EmailSummary, Note, Person
from call_insights.services.aircall_service import AircallService
from call_insights.services.pipedrive_service import PipedriveService

APP_URL = "https://app.pipedrive.com"


def build_mock_session(status: int = 200, json_data=None, text: str = "") -> MagicMock:
  """Return a mock aiohttp.ClientSession usable as an async ctx mgr."""
  response = MagicMock()
  response.status = status
  response.json = AsyncMock(return_value=json_data)
  response.text = AsyncMock(return_value=text)

  session = MagicMock()
  session.get = AsyncMock(return_value=response)
  session.post = AsyncMock(return_value=response)
  session.__aenter__ = AsyncMock(return_value=session)
  session.__aexit__ = AsyncMock(return_value=False)
  return session


@pytest.fixture
def person():
  return Person(id=42, display_name="Jane Doe", profile_url=f"{APP_URL}/person/42")


@pytest.fixture
def deal():
  return Deal(id=9, stage_id=3, url=f"{APP_URL}/deal/9")


@pytest.fixture
def call_event():
  return CallEvent(event_type="call.created", call_id="C1", caller_number="+15551234567")


@pytest.fixture
def crm(person, deal):
  """Mock PipedriveService with a fully populated person."""
  mock = AsyncMock(spec=PipedriveService)
  mock.find_person_by_phone.return_value = person
  mock.get_open_deal.return_value = deal
  mock.get_latest_note.return_value = Note(content="<p>Called back</p>")
  mock.get_recent_emails.return_value = [
      EmailSummary(subject="Proposal", timestamp="2024-03-01 09:30:00"),
  ]
  mock.list_stages.return_value = {3: "Negotiation", 4: "Won"}
  return mock


@pytest.fixture
def telephony():
  return AsyncMock(spec=AircallService)
