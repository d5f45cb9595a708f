"""This module provides a read-only Pipedrive CRM service."""

import logging
from typing import Any

import aiohttp
from call_insights.core.errors import PipedriveError
from call_insights.schemas import pipedrive as pipedrive_lib

Person = pipedrive_lib.Person
Deal = pipedrive_lib.Deal
Note = pipedrive_lib.Note
EmailSummary = pipedrive_lib.EmailSummary

RECENT_EMAILS_LIMIT = 3


class PipedriveService:
  """Looks up people and their related records in Pipedrive.

  Every request is authenticated with the `api_token` query parameter and
  returns the `data` member of Pipedrive's response envelope.
  """

  def __init__(self, api_token: str, api_url: str, app_url: str):
    self.api_token = api_token
    self.api_url = api_url.rstrip("/")
    self.app_url = app_url.rstrip("/")
    logging.info("PIPEDRIVE: Client initialized for %s.", self.api_url)

  async def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
    """Issues a GET request and unwraps the response envelope.

    Args:
      path: The endpoint path relative to the API root, e.g. "/stages".
      params: Query parameters, excluding the API token.

    Returns:
      The `data` member of the response, which may be None.

    Raises:
      PipedriveError: If Pipedrive answers with a non-2xx status or with
        `success: false`.
    """
    query = dict(params or {})
    query["api_token"] = self.api_token
    async with aiohttp.ClientSession() as session:
      response = await session.get(f"{self.api_url}{path}", params=query)
      body = await response.json(content_type=None)

    if not isinstance(body, dict):
      raise PipedriveError(path, response.status, "unexpected response body")
    if response.status >= 400 or body.get("success") is False:
      raise PipedriveError(path, response.status, body.get("error"))
    return body.get("data")

  async def find_person_by_phone(self, phone: str) -> Person | None:
    """Returns the first person whose phone number matches exactly."""
    logging.info("PIPEDRIVE: Searching person by phone %s.", phone)
    data = await self._get(
        "/persons/search",
        {
            "term": phone,
            "fields": "phone",
            "exact_match": "true",
            "limit": 1,
        },
    )
    items = (data or {}).get("items") or []
    if not items:
      return None
    return Person.from_api(items[0]["item"], self.app_url)

  async def get_open_deal(self, person_id: int) -> Deal | None:
    data = await self._get(
        f"/persons/{person_id}/deals", {"status": "open", "limit": 1}
    )
    if not data:
      return None
    return Deal.from_api(data[0], self.app_url)

  async def get_latest_note(self, person_id: int) -> Note | None:
    data = await self._get(
        "/notes",
        {"person_id": person_id, "limit": 1, "sort": "add_time DESC"},
    )
    if not data:
      return None
    return Note.from_api(data[0])

  async def get_recent_emails(
      self, person_id: int, limit: int = RECENT_EMAILS_LIMIT
  ) -> list[EmailSummary]:
    """Returns up to `limit` mailbox messages linked to the person.

    Message bodies are excluded from the response.
    """
    data = await self._get(
        f"/persons/{person_id}/mailMessages",
        {"limit": limit, "include_body": 0},
    )
    return [
        EmailSummary.from_api(item, self.app_url) for item in (data or [])[:limit]
    ]

  async def list_stages(self) -> dict[int, str]:
    """Returns every pipeline stage as an id -> name mapping."""
    data = await self._get("/stages")
    stages = {stage["id"]: stage.get("name") or "" for stage in (data or [])}
    logging.info("PIPEDRIVE: Fetched %d stages.", len(stages))
    return stages
