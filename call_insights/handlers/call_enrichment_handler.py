"""Turns an Aircall call event into an insight card built from Pipedrive."""

import asyncio
import enum
import logging
from typing import Awaitable, TypeVar

from call_insights.core import card_formatter
from call_insights.schemas import aircall as aircall_lib
from call_insights.schemas import pipedrive as pipedrive_lib
from call_insights.services import aircall_service as aircall_service_lib
from call_insights.services import pipedrive_service as pipedrive_service_lib
from call_insights.services import stage_cache as stage_cache_lib

CallEvent = aircall_lib.CallEvent
CALL_CREATED = aircall_lib.CALL_CREATED
Person = pipedrive_lib.Person
AircallService = aircall_service_lib.AircallService
PipedriveService = pipedrive_service_lib.PipedriveService
StageNameCache = stage_cache_lib.StageNameCache

T = TypeVar("T")


class EnrichmentOutcome(enum.Enum):
  IGNORED = "ignored"
  UNKNOWN_CONTACT = "unknown_contact"
  ENRICHED = "enriched"
  FAILED = "failed"


class CallEnrichmentHandler:
  """Runs the enrichment pipeline for one call event at a time.

  A single instance is shared by all webhook deliveries; its stage cache is
  the only state that outlives an event.
  """

  def __init__(
      self,
      crm: PipedriveService,
      telephony: AircallService,
      stage_cache: StageNameCache | None = None,
      display_timezone: str = "UTC",
  ):
    self.crm = crm
    self.telephony = telephony
    if stage_cache is None:
      stage_cache = StageNameCache(crm.list_stages)
    self.stage_cache = stage_cache
    self.display_timezone = display_timezone

  async def handle_event(self, event: CallEvent) -> EnrichmentOutcome:
    """Enriches the call and sends its card, never raising.

    Args:
      event: The inbound call event.

    Returns:
      What happened, for logging.
    """
    if event.event_type != CALL_CREATED:
      logging.debug(
          "ENRICHMENT: Ignoring '%s' event for call %s.",
          event.event_type,
          event.call_id,
      )
      return EnrichmentOutcome.IGNORED
    if not event.caller_number:
      logging.info(
          "ENRICHMENT: Call %s has no caller number, nothing to look up.",
          event.call_id,
      )
      return EnrichmentOutcome.IGNORED

    try:
      return await self._enrich(event)
    except Exception as e:  # pylint: disable=broad-exception-caught
      logging.exception(
          "ENRICHMENT: Failed to enrich call %s from %s: %s",
          event.call_id,
          event.caller_number,
          e,
      )
      return EnrichmentOutcome.FAILED

  async def _enrich(self, event: CallEvent) -> EnrichmentOutcome:
    person = await self.crm.find_person_by_phone(event.caller_number)
    if person is None:
      logging.info(
          "ENRICHMENT: No Pipedrive person for %s (call %s).",
          event.caller_number,
          event.call_id,
      )
      await self.telephony.send_insight_card(
          event.call_id,
          card_formatter.build_unknown_contact_card(event.caller_number),
      )
      return EnrichmentOutcome.UNKNOWN_CONTACT

    logging.info(
        "ENRICHMENT: Call %s matched person %s.", event.call_id, person.id
    )
    deal, note, emails = await asyncio.gather(
        self._or_default(self.crm.get_open_deal(person.id), None, "deal"),
        self._or_default(self.crm.get_latest_note(person.id), None, "note"),
        self._or_default(self.crm.get_recent_emails(person.id), [], "emails"),
    )

    stage_name = ""
    if deal is not None and deal.stage_id is not None:
      stage_name = await self.stage_cache.resolve(deal.stage_id)

    rows = card_formatter.build_person_card(
        person, deal, stage_name, emails, note, self.display_timezone
    )
    await self.telephony.send_insight_card(event.call_id, rows)
    return EnrichmentOutcome.ENRICHED

  async def _or_default(self, lookup: Awaitable[T], default: T, what: str) -> T:
    """Awaits an optional lookup, falling back to `default` on failure."""
    try:
      return await lookup
    except Exception as e:  # pylint: disable=broad-exception-caught
      logging.warning(
          "ENRICHMENT: Optional %s lookup failed, continuing without it: %s",
          what,
          e,
      )
      return default
