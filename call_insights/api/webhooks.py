"""FastAPI router for Aircall webhooks."""

import asyncio
import logging

import fastapi
import pydantic
from call_insights.handlers import call_enrichment_handler as handler_lib
from call_insights.schemas import aircall as aircall_lib

APIRouter = fastapi.APIRouter
Request = fastapi.Request
Response = fastapi.Response
ValidationError = pydantic.ValidationError
AircallWebhookPayload = aircall_lib.AircallWebhookPayload
CallEvent = aircall_lib.CallEvent
CallEnrichmentHandler = handler_lib.CallEnrichmentHandler

router = APIRouter(prefix="/aircall", tags=["Aircall"])

# Strong references to in-flight enrichment tasks until they finish.
_pending_tasks: set[asyncio.Task] = set()


def _on_enrichment_done(task: asyncio.Task) -> None:
  _pending_tasks.discard(task)
  if task.cancelled():
    logging.warning("WEBHOOK: %s was cancelled.", task.get_name())
    return
  error = task.exception()
  if error is not None:
    logging.error("WEBHOOK: %s crashed: %r", task.get_name(), error)
    return
  logging.info("WEBHOOK: %s finished: %s", task.get_name(), task.result())


def schedule_enrichment(
    handler: CallEnrichmentHandler, event: CallEvent
) -> asyncio.Task:
  """Starts enrichment in the background; only its completion is logged."""
  task = asyncio.create_task(
      handler.handle_event(event), name=f"enrichment-{event.call_id}"
  )
  _pending_tasks.add(task)
  task.add_done_callback(_on_enrichment_done)
  return task


@router.post("/webhook")
async def aircall_webhook(request: Request) -> Response:
  """Acknowledges an Aircall event at once and enriches the call afterwards."""
  try:
    body = await request.json()
    logging.info("WEBHOOK: Got webhook: %s", body)
    payload = AircallWebhookPayload.model_validate(body)
  except (ValueError, ValidationError) as e:
    logging.warning("WEBHOOK: Ignoring malformed webhook: %s", e)
    return Response(status_code=200)

  event = CallEvent.from_payload(payload)
  if event.event_type != aircall_lib.CALL_CREATED:
    logging.debug("WEBHOOK: Skipping '%s' event.", event.event_type)
    return Response(status_code=200)

  schedule_enrichment(request.app.state.enrichment_handler, event)
  return Response(status_code=200)
