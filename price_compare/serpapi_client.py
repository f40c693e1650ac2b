# price_compare/serpapi_client.py

import requests
from typing import Any, Dict, List, Optional

from price_compare.config import SERPAPI_BASE_URL, get_serpapi_api_key, get_serpapi_timeout
from price_compare.mappers import get_mapper, engine_for_retailer
from price_compare.models import ProductRecord
from price_compare.logger import get_logger
import price_compare.exceptions as ex

log = get_logger(__name__)

# One pooled session per process. No transport retries: each retailer gets one attempt.
session = requests.Session()


def fetch_serpapi(params: Dict[str, str], retailer: Optional[str] = None) -> Dict[str, Any]:
  """
  GET the SerpApi search endpoint and return its JSON body.

  Raises:
    UpstreamTimeoutError, UpstreamConnectionError, UpstreamHTTPError: transport failures
    UpstreamPayloadError: body is not a JSON object, or SerpApi answered with an 'error'
  Every exception carries the engine and the retailer being searched.
  """
  engine = params.get("engine")
  log.info(f"[SERPAPI] Request {SERPAPI_BASE_URL} for {retailer or 'any store'} with params: {params}")

  try:
    response = session.get(SERPAPI_BASE_URL, params=params, timeout=get_serpapi_timeout())
    response.raise_for_status()
  except requests.exceptions.Timeout as e:
    log.error(f"[SERPAPI] Timeout for engine '{engine}'. Exception: {e}")
    raise ex.UpstreamTimeoutError("SerpApi request timed out", engine=engine, retailer=retailer)
  except requests.exceptions.ConnectionError as e:
    log.error(f"[SERPAPI] Connection error for engine '{engine}'. Exception: {e}")
    raise ex.UpstreamConnectionError("Could not connect to SerpApi", engine=engine, retailer=retailer)
  except requests.exceptions.HTTPError as e:
    status_code = e.response.status_code if e.response is not None else None
    body = e.response.text[:500] if e.response is not None else ""
    log.error(f"[SERPAPI] HTTP error {status_code} for engine '{engine}'. Response data: {body}")
    raise ex.UpstreamHTTPError(status_code, engine=engine, retailer=retailer, body=body)
  except requests.exceptions.RequestException as e:
    log.error(f"[SERPAPI] Request failed for engine '{engine}'. Exception: {e}")
    raise ex.UpstreamException(f"Generic request failure: {e}", engine=engine, retailer=retailer)

  try:
    data = response.json()
  except ValueError as e:
    raise ex.UpstreamPayloadError(f"SerpApi response is not JSON: {e}", engine=engine, retailer=retailer)

  if not isinstance(data, dict):
    raise ex.UpstreamPayloadError(f"Unexpected SerpApi response type: {type(data).__name__}",
                                  engine=engine, retailer=retailer)
  if data.get("error"):
    raise ex.UpstreamPayloadError(f"SerpApi error: {data['error']}", engine=engine, retailer=retailer)
  return data


def get_products_from_serpapi(website: str, country_code: str, query: str) -> List[ProductRecord]:
  """
  Search one retailer through its SerpApi engine and map the response.

  Every failure (missing key, transport, payload) is logged and yields an empty list.
  """
  api_key = get_serpapi_api_key()
  if not api_key:
    log.error("Cannot fetch products: SERPAPI_API_KEY is missing")
    return []

  mapper = get_mapper(website)
  params = {"api_key": api_key, **mapper.build_params(query, website, country_code)}
  log.info(f"[SERPAPI] Fetching data for {website} ({engine_for_retailer(website).value}) with query: {query}")

  try:
    data = fetch_serpapi(params, retailer=website)
  except ex.UpstreamHTTPError as e:
    if e.is_auth_error:
      log.error(f"[SERPAPI] SerpApi rejected the API key while searching {website}: {e}")
    else:
      log.error(f"[SERPAPI] Error fetching data for {website}: {e}")
    return []
  except ex.UpstreamException as e:
    log.error(f"[SERPAPI] Error fetching data for {website}: {e}")
    return []

  products = mapper.map(data, website)
  log.info(f"[SERPAPI] Extracted {len(products)} products for {website}")
  return products


def get_generic_products(country_code: str, query: str) -> List[ProductRecord]:
  """Unrestricted Google Shopping search, used when no retailer returned anything."""
  api_key = get_serpapi_api_key()
  mapper = get_mapper(None)
  params = {"api_key": api_key, **mapper.build_params(query, None, country_code)}

  try:
    data = fetch_serpapi(params)
  except ex.UpstreamException as e:
    log.error(f"[SERPAPI] Error in fallback Google Shopping search: {e}")
    return []

  return mapper.map(data, None)
