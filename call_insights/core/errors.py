"""Exceptions raised by the outbound API clients."""


class CallInsightsError(Exception):
  """Base class for errors raised by this service."""


class UpstreamError(CallInsightsError):
  """An upstream REST API answered with an error."""

  service = "upstream"

  def __init__(self, path: str, status: int, detail: str | None = None):
    self.path = path
    self.status = status
    self.detail = detail
    message = f"{self.service} {path} failed with HTTP {status}"
    if detail:
      message = f"{message}: {detail}"
    super().__init__(message)


class PipedriveError(UpstreamError):
  service = "Pipedrive"


class AircallError(UpstreamError):
  service = "Aircall"
