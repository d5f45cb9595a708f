"""Main application for the Call Insight Relay."""

from contextlib import asynccontextmanager

import logging
import sys
from google.cloud.logging_v2.handlers import StructuredLogHandler
import dotenv
import fastapi
from fastapi import responses
from call_insights.api import webhooks
from call_insights.config import settings
from call_insights.handlers import call_enrichment_handler as handler_lib
from call_insights.services import aircall_service as aircall_service_lib
from call_insights.services import pipedrive_service as pipedrive_service_lib

FastAPI = fastapi.FastAPI
PlainTextResponse = responses.PlainTextResponse
load_dotenv = dotenv.load_dotenv
AircallService = aircall_service_lib.AircallService
PipedriveService = pipedrive_service_lib.PipedriveService
CallEnrichmentHandler = handler_lib.CallEnrichmentHandler

load_dotenv()


def setup_async_logging():
  """Configures a single structured logger writing JSON lines to stdout."""
  root_logger = logging.getLogger()
  root_logger.handlers.clear()
  root_logger.setLevel(settings.LOG_LEVEL)
  handler = StructuredLogHandler(stream=sys.stdout)
  root_logger.addHandler(handler)


# --- Logging and App Setup ---
setup_async_logging()


def build_enrichment_handler() -> CallEnrichmentHandler:
  """Wires the Pipedrive and Aircall clients from settings."""
  crm = PipedriveService(
      api_token=settings.PIPEDRIVE_API_TOKEN,
      api_url=settings.PIPEDRIVE_API_URL,
      app_url=settings.PIPEDRIVE_APP_URL,
  )
  telephony = AircallService(
      api_id=settings.AIRCALL_API_ID,
      api_token=settings.AIRCALL_API_TOKEN,
      api_url=settings.AIRCALL_API_URL,
  )
  return CallEnrichmentHandler(
      crm=crm,
      telephony=telephony,
      display_timezone=settings.DISPLAY_TIMEZONE,
  )


@asynccontextmanager
async def lifespan(app: FastAPI):
  logging.info("FastAPI server starting up...")
  app.state.enrichment_handler = build_enrichment_handler()
  yield
  logging.info("FastAPI server shutting down.")


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
app.include_router(webhooks.router)


@app.get("/", response_class=PlainTextResponse)
async def root():
  """Health check used by the hosting platform."""
  return "Webhook is alive!"


if __name__ == "__main__":
  import uvicorn  # pylint: disable=g-import-not-at-top

  uvicorn.run(
      "call_insights.main:app",
      host="0.0.0.0",
      port=settings.PORT,
  )
