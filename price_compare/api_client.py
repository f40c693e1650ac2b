# price_compare/api_client.py

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry
from typing import Dict, List, Optional

from price_compare.config import CLIENT_TIMEOUT_SECONDS, CLIENT_RETRY_DELAY_SECONDS, get_api_url
from price_compare.logger import get_logger

log = get_logger(__name__)


class FixedDelayRetry(Retry):
  """Retry that always waits the same delay instead of an exponential backoff."""

  def __init__(self, *args, delay: float = CLIENT_RETRY_DELAY_SECONDS, **kwargs):
    super().__init__(*args, **kwargs)
    self.delay = delay

  def new(self, **kw):
    retry = super().new(**kw)
    retry.delay = self.delay
    return retry

  def get_backoff_time(self):
    return self.delay


def network_retry(delay: float = CLIENT_RETRY_DELAY_SECONDS) -> FixedDelayRetry:
  """
  One retry for requests that got no response at all (connect/read failures).
  HTTP error statuses are never retried. allowed_methods=None lets POST retry too.
  """
  return FixedDelayRetry(total=1, connect=1, read=1, status=0, other=0, redirect=False,
                         allowed_methods=None, raise_on_status=False, delay=delay)


class ApiClient:
  """
  Client for the price comparison backend.

  Network failures (no response at all) are retried once after a short delay.
  HTTP error statuses are returned to the caller untouched.
  """

  def __init__(self, base_url: Optional[str] = None, timeout: float = CLIENT_TIMEOUT_SECONDS,
               retry_delay: float = CLIENT_RETRY_DELAY_SECONDS, session: Optional[requests.Session] = None):
    self.base_url = f"{(base_url or get_api_url()).rstrip('/')}/api"
    self.timeout = timeout
    self.session = session or requests.Session()
    self.session.headers.update({"Content-Type": "application/json"})

    adapter = HTTPAdapter(max_retries=network_retry(retry_delay))
    self.session.mount("http://", adapter)
    self.session.mount("https://", adapter)

  def _request(self, method: str, path: str, **kwargs) -> requests.Response:
    url = f"{self.base_url}{path}"
    response = self.session.request(method, url, timeout=self.timeout, **kwargs)

    if response.status_code >= 400:
      log.error(f"[CLIENT] Server responded with error: {response.status_code} {response.text[:300]}")
    response.raise_for_status()
    return response

  def search_products(self, query: str, country: str, raise_errors: bool = False) -> List[dict]:
    """Product dicts sorted by price; [] when the request fails unless raise_errors is set."""
    try:
      response = self._request("POST", "/products/search", json={"query": query, "country": country})
      return response.json()
    except (requests.exceptions.RequestException, ValueError) as e:
      log.error(f"[CLIENT] Error searching products for '{query}' in {country}: {e}")
      if raise_errors:
        raise
      return []

  def get_countries(self) -> Dict[str, dict]:
    """Country map from the backend; {} when the request fails."""
    try:
      response = self._request("GET", "/products/countries")
      return response.json()
    except (requests.exceptions.RequestException, ValueError) as e:
      log.error(f"[CLIENT] Error fetching countries: {e}")
      return {}


def is_error_response(results: List[dict]) -> bool:
  """True for the single-record error answer (missing API key)."""
  return isinstance(results, list) and len(results) == 1 and bool(results[0].get("message"))
