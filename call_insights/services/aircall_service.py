"""This module provides an Aircall telephony service."""

import logging
from typing import Sequence

import aiohttp
from call_insights.core.errors import AircallError
from call_insights.schemas import aircall as aircall_lib

CardRow = aircall_lib.CardRow


class AircallService:
  """Pushes insight cards to calls through the Aircall REST API."""

  def __init__(self, api_id: str, api_token: str, api_url: str):
    self.auth = aiohttp.BasicAuth(login=api_id, password=api_token)
    self.api_url = api_url.rstrip("/")
    logging.info("AIRCALL: Client initialized successfully.")

  async def send_insight_card(self, call_id: str, rows: Sequence[CardRow]):
    """Displays an insight card to the agent on the given call.

    Args:
        call_id: The Aircall call identifier.
        rows: The card rows, in display order.

    Raises:
        AircallError: If Aircall rejects the card.
    """
    path = f"/calls/{call_id}/insight_cards"
    payload = {"contents": [row.to_content() for row in rows]}
    logging.info(
        "AIRCALL: Sending %d-row insight card to call %s.", len(rows), call_id
    )
    async with aiohttp.ClientSession(auth=self.auth) as session:
      response = await session.post(f"{self.api_url}{path}", json=payload)
      if response.status >= 400:
        detail = await response.text()
        raise AircallError(path, response.status, detail)

    logging.info("AIRCALL: Insight card delivered to call %s.", call_id)
