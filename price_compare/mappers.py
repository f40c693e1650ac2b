# price_compare/mappers.py

"""
SerpApi engines and the mappers that turn their JSON into ProductRecord lists.

Each retailer id is served by one engine. Every engine knows how to build its
request parameters and how to read its response shape:

  amazon_search    shopping_results, falling back to organic_results
  walmart_search   organic_results with nested primary_offer prices
  google_shopping  shopping_results, filtered by the reported source
"""

from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from price_compare.config import MAX_RESULTS_PER_CALL, FALLBACK_WEBSITE_LABEL
from price_compare.helpers import extract_price, resolve_currency, clean_product_name
from price_compare.models import ProductRecord
from price_compare.logger import get_logger

log = get_logger(__name__)


class Engine(str, Enum):
  AMAZON = "amazon_search"
  WALMART = "walmart_search"
  GOOGLE_SHOPPING = "google_shopping"


ENGINE_MAP = {
  "amazon": Engine.AMAZON,
  "walmart": Engine.WALMART,
  "bestbuy": Engine.GOOGLE_SHOPPING,
  "target": Engine.GOOGLE_SHOPPING,
  "newegg": Engine.GOOGLE_SHOPPING,
}

# Google Shopping retailers searched without a site: restriction or source filter
UNFILTERED_RETAILERS = ("bestbuy", "target")


def engine_for_retailer(retailer: str) -> Engine:
  return ENGINE_MAP.get((retailer or "").lower(), Engine.GOOGLE_SHOPPING)


def country_tld(country_code: str) -> str:
  code = (country_code or "").lower()
  return "com" if code == "us" else code


def numeric_or_extracted(value: Any) -> float:
  """Numbers pass through, anything else goes through extract_price."""
  if isinstance(value, (int, float)) and not isinstance(value, bool):
    return float(value)
  return extract_price(str(value or "0"))


def first_entries(payload: Dict[str, Any], key: str) -> List[Any]:
  entries = payload.get(key)
  if not isinstance(entries, list):
    return []
  return entries[:MAX_RESULTS_PER_CALL]


class EngineMapper:
  """Request builder and response mapper for one SerpApi engine."""

  engine: Engine = None

  def build_params(self, query: str, retailer: Optional[str], country_code: str) -> Dict[str, str]:
    raise NotImplementedError

  def map(self, payload: Dict[str, Any], retailer: Optional[str]) -> List[ProductRecord]:
    raise NotImplementedError

  def _collect(self, entries: Iterable[Any], convert, retailer: Optional[str]) -> List[ProductRecord]:
    """Run convert over entries, dropping duplicates by key and entries that fail to convert."""
    products = list()
    seen_items = set()

    for idx, item in enumerate(entries):
      if not isinstance(item, dict) or not item.get("title"):
        log.debug(f"[MAPPER] {self.engine.value}: entry #{idx + 1} has no title. Skipping.")
        continue
      try:
        converted = convert(item, retailer)
      except (TypeError, ValueError, AttributeError) as e:
        log.warning(f"[MAPPER] {self.engine.value}: skipped entry #{idx + 1} for '{retailer}' due to bad data: {e}")
        continue
      if converted is None:
        continue

      key, product = converted
      if not product.product_name:
        log.debug(f"[MAPPER] {self.engine.value}: entry #{idx + 1} title is empty after cleaning. Skipping.")
        continue
      if key in seen_items:
        continue
      seen_items.add(key)
      products.append(product)

    return products


class AmazonSearchMapper(EngineMapper):
  engine = Engine.AMAZON

  def build_params(self, query, retailer, country_code):
    return {
      "engine": self.engine.value,
      "q": query,
      "amazon_domain": f"amazon.{country_tld(country_code)}",
    }

  def map(self, payload, retailer):
    products = self._collect(first_entries(payload, "shopping_results"), self._shopping_item, retailer)
    if not products:
      products = self._collect(first_entries(payload, "organic_results"), self._organic_item, retailer)
    return products

  def _price(self, raw_price: Any) -> float:
    if isinstance(raw_price, dict):
      return numeric_or_extracted(raw_price.get("value", raw_price.get("raw")))
    return numeric_or_extracted(raw_price)

  def _shopping_item(self, item, retailer) -> Tuple[tuple, ProductRecord]:
    price = self._price(item.get("price"))
    raw_price = item.get("price")
    if isinstance(raw_price, dict) and raw_price.get("currency"):
      currency = raw_price["currency"]
    else:
      currency = item.get("currency") or "USD"

    product = ProductRecord(
      link=item.get("link") or "",
      price=price,
      currency=currency,
      product_name=clean_product_name(item["title"]),
      website=retailer,
      image_url=item.get("thumbnail") or "",
      rating=item.get("rating") or 0,
      reviews=item.get("reviews") or 0,
      availability=item.get("availability") or "In Stock",
    )
    return (item["title"], price), product

  def _organic_item(self, item, retailer) -> Tuple[tuple, ProductRecord]:
    price = self._price(item.get("price"))
    product = ProductRecord(
      link=item.get("link") or "",
      price=price,
      currency="USD",
      product_name=clean_product_name(item["title"]),
      website=retailer,
      image_url=item.get("thumbnail") or "",
    )
    return (item["title"], price), product


class WalmartSearchMapper(EngineMapper):
  engine = Engine.WALMART

  def build_params(self, query, retailer, country_code):
    return {"engine": self.engine.value, "query": query}

  def map(self, payload, retailer):
    return self._collect(first_entries(payload, "organic_results"), self._organic_item, retailer)

  def _organic_item(self, item, retailer) -> Tuple[tuple, ProductRecord]:
    offer = item.get("primary_offer") if isinstance(item.get("primary_offer"), dict) else {}

    price = 0.0
    if offer.get("offer_price"):
      price = numeric_or_extracted(offer["offer_price"])
    elif item.get("price"):
      price = numeric_or_extracted(item["price"])

    product = ProductRecord(
      link=item.get("product_page_url") or item.get("link") or "",
      price=price,
      currency=offer.get("currency") or "USD",
      product_name=clean_product_name(item["title"]),
      website=retailer,
      image_url=item.get("thumbnail") or "",
      rating=item.get("rating") or 0,
      reviews=item.get("reviews_count") or 0,
      availability=item.get("availability_status") or "In Stock",
    )
    return (item["title"], price), product


class GoogleShoppingMapper(EngineMapper):
  """
  Google Shopping lists offers from every store, so for a named retailer only
  entries whose source mentions it are kept. With retailer=None (the generic
  fallback search) nothing is filtered and unnamed sources get a fixed label.
  """
  engine = Engine.GOOGLE_SHOPPING

  def build_params(self, query, retailer, country_code):
    q = query
    if retailer and retailer.lower() not in UNFILTERED_RETAILERS:
      q += f" site:{retailer.lower()}.com"
    return {
      "engine": self.engine.value,
      "q": q,
      "google_domain": f"google.{country_tld(country_code)}",
    }

  def map(self, payload, retailer):
    return self._collect(first_entries(payload, "shopping_results"), self._shopping_item, retailer)

  def _shopping_item(self, item, retailer) -> Optional[Tuple[tuple, ProductRecord]]:
    source = item.get("source")
    if source is not None and not isinstance(source, str):
      source = str(source)

    if (retailer and retailer.lower() not in UNFILTERED_RETAILERS
        and source and retailer.lower() not in source.lower()):
      log.debug(f"[MAPPER] Dropped '{item['title']}' from source '{source}', not {retailer}")
      return None

    price_text = str(item.get("price") or "")
    price = extract_price(price_text) if item.get("price") else 0.0
    website = source or retailer or FALLBACK_WEBSITE_LABEL

    product = ProductRecord(
      link=item.get("link") or "",
      price=price,
      currency=resolve_currency(price_text),
      product_name=clean_product_name(item["title"]),
      website=website,
      image_url=item.get("thumbnail") or "",
      rating=item.get("rating") or 0,
      reviews=item.get("reviews") or 0,
      availability="In Stock",
    )
    return (item["title"], price, website), product


MAPPERS = {
  Engine.AMAZON: AmazonSearchMapper(),
  Engine.WALMART: WalmartSearchMapper(),
  Engine.GOOGLE_SHOPPING: GoogleShoppingMapper(),
}


def get_mapper(retailer: Optional[str]) -> EngineMapper:
  """Mapper for a retailer id; None selects the unrestricted Google Shopping mapper."""
  if retailer is None:
    return MAPPERS[Engine.GOOGLE_SHOPPING]
  return MAPPERS[engine_for_retailer(retailer)]
