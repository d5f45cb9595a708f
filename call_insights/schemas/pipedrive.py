"""Pydantic schemas for the Pipedrive records shown on a card.

Each model is a read-only snapshot built from one Pipedrive API item. The
`from_api` constructors tolerate missing keys since Pipedrive omits or nulls
fields freely.
"""

from typing import Any

import pydantic

BaseModel = pydantic.BaseModel
ConfigDict = pydantic.ConfigDict


class Person(BaseModel):
  """A Pipedrive person matched by phone number."""

  model_config = ConfigDict(frozen=True)

  id: int
  display_name: str
  profile_url: str

  @classmethod
  def from_api(cls, item: dict[str, Any], app_url: str) -> "Person":
    person_id = item["id"]
    return cls(
        id=person_id,
        display_name=item.get("name") or "",
        profile_url=f"{app_url}/person/{person_id}",
    )


class Deal(BaseModel):
  """The person's open deal."""

  model_config = ConfigDict(frozen=True)

  id: int
  stage_id: int | None = None
  url: str

  @classmethod
  def from_api(cls, item: dict[str, Any], app_url: str) -> "Deal":
    deal_id = item["id"]
    return cls(
        id=deal_id,
        stage_id=item.get("stage_id"),
        url=f"{app_url}/deal/{deal_id}",
    )


class Note(BaseModel):
  """The latest note attached to a person. `content` is HTML."""

  model_config = ConfigDict(frozen=True)

  content: str = ""
  created_at: str | None = None

  @classmethod
  def from_api(cls, item: dict[str, Any]) -> "Note":
    return cls(
        content=item.get("content") or "",
        created_at=item.get("add_time"),
    )


class EmailSummary(BaseModel):
  """Subject line and timestamp of a mailbox message, without its body."""

  model_config = ConfigDict(frozen=True)

  subject: str | None = None
  timestamp: str | None = None
  view_url: str | None = None

  @classmethod
  def from_api(cls, item: dict[str, Any], app_url: str) -> "EmailSummary":
    # The mailMessages endpoint wraps each message in {"object", "data"}.
    message = item.get("data") or item
    thread_id = message.get("mail_thread_id")
    return cls(
        subject=message.get("subject"),
        timestamp=(
            message.get("message_time")
            or message.get("add_time")
            or item.get("timestamp")
        ),
        view_url=f"{app_url}/mail/thread/{thread_id}" if thread_id else None,
    )
