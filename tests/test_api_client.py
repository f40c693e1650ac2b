# tests/test_api_client.py

import json
import socket
import pytest
import requests
import urllib3.util.retry as retry_module
from urllib3.exceptions import ConnectTimeoutError, MaxRetryError

from price_compare.api_client import ApiClient, FixedDelayRetry, network_retry, is_error_response


def make_response(status_code, body):
  response = requests.Response()
  response.status_code = status_code
  response.reason = "OK" if status_code < 400 else "Error"
  response.url = "http://backend.test/api/products/search"
  response._content = json.dumps(body).encode("utf-8")
  return response


class FakeSession:
  """Plays back a scripted list of responses/exceptions, one per request."""

  def __init__(self, script):
    self.script = list(script)
    self.calls = list()
    self.headers = dict()
    self.adapters = dict()

  def mount(self, prefix, adapter):
    self.adapters[prefix] = adapter

  def request(self, method, url, timeout=None, **kwargs):
    self.calls.append({"method": method, "url": url, "timeout": timeout, **kwargs})
    outcome = self.script.pop(0)
    if isinstance(outcome, Exception):
      raise outcome
    return outcome


@pytest.fixture
def sleeps(monkeypatch):
  """Records the delays urllib3's Retry sleeps for between attempts."""
  delays = list()
  monkeypatch.setattr(retry_module.time, "sleep", delays.append)
  return delays


def build_client(script):
  session = FakeSession(script)
  return ApiClient(base_url="http://backend.test/", session=session), session


def closed_port():
  with socket.socket() as sock:
    sock.bind(("127.0.0.1", 0))
    return sock.getsockname()[1]


def unreachable_client():
  session = requests.Session()
  session.trust_env = False
  return ApiClient(base_url=f"http://127.0.0.1:{closed_port()}", session=session)


def test_search_products_success():
  client, session = build_client([make_response(200, [{"productName": "Phone", "price": 10}])])

  results = client.search_products("phone", "US")

  assert results == [{"productName": "Phone", "price": 10}]
  assert session.calls[0]["method"] == "POST"
  assert session.calls[0]["url"] == "http://backend.test/api/products/search"
  assert session.calls[0]["json"] == {"query": "phone", "country": "US"}
  assert session.calls[0]["timeout"] == 30
  assert session.headers["Content-Type"] == "application/json"


def test_retry_adapter_is_mounted_for_both_schemes():
  client, session = build_client([])

  assert set(session.adapters) == {"http://", "https://"}
  for adapter in session.adapters.values():
    retry = adapter.max_retries
    assert isinstance(retry, FixedDelayRetry)
    assert (retry.total, retry.connect, retry.read, retry.status, retry.other) == (1, 1, 1, 0, 0)
    assert retry.allowed_methods is None


def test_retry_policy_one_network_retry_after_fixed_delay():
  retry = network_retry()
  url = "http://backend.test/api/products/search"

  # HTTP statuses are answered, not retried
  assert not retry.is_retry("POST", 500)
  assert not retry.is_retry("POST", 503)

  retry = retry.increment("POST", url, error=ConnectTimeoutError("refused"))
  assert isinstance(retry, FixedDelayRetry)
  assert retry.get_backoff_time() == 1.0

  with pytest.raises(MaxRetryError):
    retry.increment("POST", url, error=ConnectTimeoutError("refused again"))


def test_network_error_is_retried_once(sleeps):
  client = unreachable_client()

  assert client.search_products("phone", "US") == []
  assert sleeps == [1.0]


def test_retry_delay_is_configurable(sleeps):
  session = requests.Session()
  session.trust_env = False
  client = ApiClient(base_url=f"http://127.0.0.1:{closed_port()}", retry_delay=0.25, session=session)

  assert client.get_countries() == {}
  assert sleeps == [0.25]


def test_repeated_network_error_can_be_raised(sleeps):
  client = unreachable_client()

  with pytest.raises(requests.exceptions.ConnectionError):
    client.search_products("phone", "US", raise_errors=True)
  assert sleeps == [1.0]


def test_session_errors_give_empty_result():
  client, session = build_client([requests.exceptions.Timeout("slow")])

  assert client.search_products("phone", "US") == []
  assert len(session.calls) == 1


def test_http_errors_are_not_retried():
  client, session = build_client([make_response(500, {"message": "Server error", "error": "boom"})])

  assert client.search_products("phone", "US") == []
  assert len(session.calls) == 1


def test_get_countries():
  client, session = build_client([make_response(200, {"US": {"code": "US"}})])
  assert client.get_countries() == {"US": {"code": "US"}}
  assert session.calls[0]["url"] == "http://backend.test/api/products/countries"


def test_get_countries_failure_returns_empty():
  client, _ = build_client([make_response(404, {"detail": "Not Found"})])
  assert client.get_countries() == {}


def test_is_error_response():
  assert is_error_response([{"message": "API key is missing.", "price": 0}])
  assert not is_error_response([{"productName": "Phone", "price": 1}])
  assert not is_error_response([{"message": "x"}, {"message": "y"}])
  assert not is_error_response([])
