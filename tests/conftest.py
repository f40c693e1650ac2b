# tests/conftest.py

import pytest
from price_compare.logger import configure_logging
configure_logging()


@pytest.fixture(autouse=True)
def set_test_env(monkeypatch):
  monkeypatch.setenv("APP_ENV", "testing")
  monkeypatch.setenv("SERPAPI_API_KEY", "test-key")


@pytest.fixture
def fake_serpapi(monkeypatch):
  """
  Replaces the SerpApi HTTP call. Register responses with
  fake.respond(predicate, payload) where payload is a dict, an
  exception to raise, or a callable taking the params.
  Every call's params are recorded in fake.calls.
  """
  from price_compare import serpapi_client

  class FakeSerpApi:
    def __init__(self):
      self.calls = list()
      self.routes = list()

    def respond(self, predicate, payload):
      self.routes.append((predicate, payload))

    def __call__(self, params, retailer=None):
      self.calls.append(dict(params))
      for predicate, payload in self.routes:
        if predicate(params):
          if isinstance(payload, Exception):
            raise payload
          if callable(payload):
            return payload(params)
          return payload
      return {}

  fake = FakeSerpApi()
  monkeypatch.setattr(serpapi_client, "fetch_serpapi", fake)
  return fake
