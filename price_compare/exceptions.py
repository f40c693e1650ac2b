# price_compare/exceptions.py

from typing import Optional


class UpstreamException(Exception):
  """
  Failed SerpApi call. Carries the engine and, when known, the retailer
  being searched so per-retailer failures can be logged and skipped.
  """
  def __init__(self, message: str, engine: Optional[str] = None, retailer: Optional[str] = None):
    super().__init__(message)
    self.message = message
    self.engine = engine
    self.retailer = retailer

  def __str__(self):
    where = " / ".join(part for part in (self.engine, self.retailer) if part)
    return f"{self.message} ({where})" if where else self.message

class UpstreamTimeoutError(UpstreamException):
  pass

class UpstreamConnectionError(UpstreamException):
  pass

class UpstreamHTTPError(UpstreamException):
  """4xx/5xx from SerpApi. 401/403 mean the API key was rejected."""
  def __init__(self, status_code: Optional[int], engine: Optional[str] = None,
               retailer: Optional[str] = None, body: str = ""):
    super().__init__(f"SerpApi returned HTTP {status_code}", engine=engine, retailer=retailer)
    self.status_code = status_code
    self.body = body

  @property
  def is_auth_error(self) -> bool:
    return self.status_code in (401, 403)

class UpstreamPayloadError(UpstreamException):
  """Body is not a JSON object, or SerpApi reported an 'error' in it"""
