"""Builds insight card rows from Pipedrive records."""

import datetime
import re
from typing import Sequence
from zoneinfo import ZoneInfo

from call_insights.schemas import aircall as aircall_lib
from call_insights.schemas import pipedrive as pipedrive_lib

CardRow = aircall_lib.CardRow
Person = pipedrive_lib.Person
Deal = pipedrive_lib.Deal
Note = pipedrive_lib.Note
EmailSummary = pipedrive_lib.EmailSummary

NOTE_MAX_LENGTH = 120
ELLIPSIS = "…"
UNKNOWN_CONTACT_TITLE = "Unknown contact"
NO_SUBJECT = "(no subject)"
UNKNOWN_DATE = "unknown date"
UNKNOWN_STAGE = "Unknown stage"
_TIMESTAMP_FORMAT = "%b %d, %Y %H:%M"
_TAG_RE = re.compile(r"<[^>]*>")


def strip_tags(html: str) -> str:
  """Replaces every markup tag with a single space."""
  return _TAG_RE.sub(" ", html)


def truncate(text: str, limit: int = NOTE_MAX_LENGTH) -> str:
  """Cuts text to `limit` characters, the last one becoming an ellipsis."""
  if len(text) <= limit:
    return text
  return text[: limit - 1] + ELLIPSIS


def format_timestamp(value: str | None, timezone: str = "UTC") -> str:
  """Renders a Pipedrive timestamp in the display timezone.

  Pipedrive reports times in UTC as "YYYY-MM-DD HH:MM:SS"; ISO 8601 strings
  are accepted too. Values that cannot be parsed are returned unchanged.
  """
  if not value:
    return UNKNOWN_DATE
  try:
    parsed = datetime.datetime.fromisoformat(value.replace("Z", "+00:00"))
  except ValueError:
    return value
  if parsed.tzinfo is None:
    parsed = parsed.replace(tzinfo=datetime.timezone.utc)
  return parsed.astimezone(ZoneInfo(timezone)).strftime(_TIMESTAMP_FORMAT)


def build_unknown_contact_card(phone: str) -> list[CardRow]:
  return [
      CardRow(kind="title", text=UNKNOWN_CONTACT_TITLE),
      CardRow(kind="shortText", label="Number", text=phone),
  ]


def build_person_card(
    person: Person,
    deal: Deal | None,
    stage_name: str,
    emails: Sequence[EmailSummary],
    note: Note | None,
    timezone: str = "UTC",
) -> list[CardRow]:
  """Builds the rows of an enriched card, in display order.

  Args:
    person: The caller.
    deal: The caller's open deal, if any.
    stage_name: Name of the deal's stage; "" when it could not be resolved.
    emails: Recent email summaries, shown in the order given.
    note: The latest note, if any.
    timezone: IANA zone used to render email timestamps.

  Returns:
    The title row followed by the deal, email and note rows that apply.
  """
  rows = [CardRow(kind="title", text=person.display_name, link=person.profile_url)]

  if deal is not None:
    if not stage_name:
      stage_name = (
          f"Stage #{deal.stage_id}" if deal.stage_id is not None else UNKNOWN_STAGE
      )
    rows.append(
        CardRow(
            kind="shortText",
            label="Deal stage",
            text=stage_name,
            link=deal.url,
        )
    )

  for email in emails:
    subject = email.subject or NO_SUBJECT
    when = format_timestamp(email.timestamp, timezone)
    rows.append(
        CardRow(kind="shortText", text=f"{subject} — {when}", link=email.view_url)
    )

  if note is not None and note.content:
    rows.append(
        CardRow(
            kind="shortText",
            label="Latest note",
            text=truncate(strip_tags(note.content)),
        )
    )

  return rows
