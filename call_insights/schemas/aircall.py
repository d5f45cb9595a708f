"""Pydantic schemas for Aircall webhooks and insight cards."""

from typing import Literal

import pydantic

Field = pydantic.Field
BaseModel = pydantic.BaseModel
ConfigDict = pydantic.ConfigDict

CALL_CREATED = "call.created"

CardRowKind = Literal["title", "shortText"]


class WebhookCallData(BaseModel):
  """The `data` object of an Aircall call webhook."""

  model_config = ConfigDict(extra="ignore")

  id: int | str = Field(..., description="Aircall call identifier.")
  raw_digits: str | None = Field(
      None, description="Caller number as dialed, e.g. '+15551234567'."
  )
  display_digits: str | None = Field(
      None, description="Caller number formatted for display."
  )


class AircallWebhookPayload(BaseModel):
  """Defines the data structure of an inbound Aircall webhook."""

  model_config = ConfigDict(extra="ignore")

  event: str = Field(..., description="Event name, e.g. 'call.created'.")
  data: WebhookCallData | None = Field(
      None, description="The call the event refers to."
  )


class CallEvent(BaseModel):
  """The part of a webhook the enrichment pipeline works on."""

  model_config = ConfigDict(frozen=True)

  event_type: str
  call_id: str
  caller_number: str = ""

  @classmethod
  def from_payload(cls, payload: AircallWebhookPayload) -> "CallEvent":
    data = payload.data
    if data is None:
      return cls(event_type=payload.event, call_id="")
    return cls(
        event_type=payload.event,
        call_id=str(data.id),
        caller_number=data.raw_digits or data.display_digits or "",
    )


class CardRow(BaseModel):
  """One line of an Aircall insight card."""

  model_config = ConfigDict(frozen=True)

  kind: CardRowKind
  text: str
  label: str | None = None
  link: str | None = None

  def to_content(self) -> dict[str, str]:
    """Serializes the row the way the insight card endpoint expects it."""
    content = {"type": self.kind}
    if self.label is not None:
      content["label"] = self.label
    content["text"] = self.text
    if self.link:
      content["link"] = self.link
    return content
