# price_compare/countries.py

from types import MappingProxyType
from typing import Dict, List, Optional, Tuple
from pydantic import BaseModel, ConfigDict

from price_compare.config import DEFAULT_COUNTRY
from price_compare.logger import get_logger

log = get_logger(__name__)


class CountryConfig(BaseModel):
  model_config = ConfigDict(frozen=True)

  code: str
  name: str
  currency: str
  websites: Tuple[str, ...]


# Retailers are queried in this order, keep the most useful first
COUNTRIES = MappingProxyType({
  "US": CountryConfig(code="US", name="United States", currency="USD",
                      websites=("amazon", "bestbuy", "walmart", "target", "newegg")),
  "IN": CountryConfig(code="IN", name="India", currency="INR",
                      websites=("amazon", "flipkart", "croma", "reliance")),
  "UK": CountryConfig(code="UK", name="United Kingdom", currency="GBP",
                      websites=("amazon", "argos", "currys", "johnlewis")),
  "CA": CountryConfig(code="CA", name="Canada", currency="CAD",
                      websites=("amazon", "bestbuy", "walmart", "thesource")),
  "AU": CountryConfig(code="AU", name="Australia", currency="AUD",
                      websites=("amazon", "jbhifi", "kogan", "harveynorman")),
  "DE": CountryConfig(code="DE", name="Germany", currency="EUR",
                      websites=("amazon", "saturn", "mediamarkt", "otto")),
})


def get_country(country_code: str) -> Optional[CountryConfig]:
  return COUNTRIES.get((country_code or "").strip().upper())


def get_websites_for_country(country_code: str) -> List[str]:
  """
  Retailer ids for a country, in query order.
  Unknown codes fall back to the US list (lookup is case-insensitive).
  """
  country = get_country(country_code)
  if country is None:
    log.debug(f"Unknown country code '{country_code}', using {DEFAULT_COUNTRY} retailers")
    country = COUNTRIES[DEFAULT_COUNTRY]
  return list(country.websites)


resolve_retailers = get_websites_for_country


def countries_as_dict() -> Dict[str, dict]:
  """JSON shape served by GET /api/products/countries."""
  return {code: country.model_dump() for code, country in COUNTRIES.items()}
