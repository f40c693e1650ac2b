# price_compare/product_service.py

from typing import List

from price_compare.config import EARLY_STOP_THRESHOLD, DEFAULT_COUNTRY, get_serpapi_api_key
from price_compare.countries import get_websites_for_country
from price_compare.helpers import remove_duplicates, sort_products_by_price, normalize_query
from price_compare.models import ProductRecord, SearchOutcome
from price_compare import serpapi_client
from price_compare.logger import get_logger

log = get_logger(__name__)


def scrape_multiple_websites(query: str, websites: List[str], country_code: str = DEFAULT_COUNTRY) -> List[ProductRecord]:
  """
  Query retailers one after another, in the given order, until EARLY_STOP_THRESHOLD
  records are collected. When nothing at all was found, run one generic
  Google Shopping search instead.

  Args:
    query (str): Text typed by the user
    websites (List[str]): Retailer ids, in query order
    country_code (str): Country used for the engine domains

  Returns:
    List[ProductRecord]: Merged records, not yet deduplicated or sorted
  """
  log.info(f"[SEARCH] Searching for \"{query}\" across websites: {', '.join(websites)} in {country_code}")

  all_results = list()

  for website in websites:
    try:
      results = serpapi_client.get_products_from_serpapi(website, country_code, query)
      all_results.extend(results)
    except Exception as e:
      log.error(f"[SEARCH] Error getting products for {website}: {e}", exc_info=True)
      continue

    if len(all_results) >= EARLY_STOP_THRESHOLD:
      log.info(f"[SEARCH] Found {len(all_results)} products, stopping further searches")
      break

  if not all_results:
    log.info("[SEARCH] No results from specific websites, trying generic Google Shopping search")
    try:
      all_results.extend(serpapi_client.get_generic_products(country_code, query))
      log.info(f"[SEARCH] Found {len(all_results)} products from generic Google Shopping search")
    except Exception as e:
      log.error(f"[SEARCH] Error in fallback Google Shopping search: {e}", exc_info=True)

  return all_results


def run_search(query: str, country_code: str = DEFAULT_COUNTRY) -> SearchOutcome:
  """
  Search every retailer configured for a country and return deduplicated records
  sorted by ascending price, or a configuration error when no API key is set.
  """
  log.info(f"[SEARCH] Searching for \"{query}\" in {country_code} (normalized: '{normalize_query(query)}')")

  if not get_serpapi_api_key():
    log.error("SERPAPI_API_KEY is missing. Cannot perform search.")
    return SearchOutcome.missing_credential()

  try:
    websites = get_websites_for_country(country_code)
    if not websites:
      log.warning(f"No websites configured for country code: {country_code}")
      return SearchOutcome()

    products = scrape_multiple_websites(query, websites, country_code)
    log.info(f"[SEARCH] Found {len(products)} products for \"{query}\" in {country_code}")

    unique_products = remove_duplicates(products)
    log.info(f"[SEARCH] After removing duplicates: {len(unique_products)} unique products")

    return SearchOutcome(products=sort_products_by_price(unique_products))
  except Exception as e:
    log.error(f"[SEARCH] Error searching for products: {e}", exc_info=True)
    return SearchOutcome()


def search_products(query: str, country_code: str = DEFAULT_COUNTRY) -> List[dict]:
  """Wire form of run_search: record dicts, or a single error-shaped record."""
  return run_search(query, country_code).to_wire()
