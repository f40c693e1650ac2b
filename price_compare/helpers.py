# price_compare/helpers.py

import re
from typing import Any, List, Sequence

from price_compare.models import ProductRecord
from price_compare.logger import get_logger

log = get_logger(__name__)

CURRENCY_SYMBOLS = ("$", "€", "£", "¥", "₹", "CA$", "A$")

# "$" is contained in "CA$" and "A$", so the longer symbols are tried first.
# Otherwise the order above decides (e.g. "$" before "€").
SYMBOL_SCAN_ORDER = sorted(CURRENCY_SYMBOLS, key=len, reverse=True)

CURRENCY_SYMBOL_TO_CODE = {
  "$": "USD",
  "€": "EUR",
  "£": "GBP",
  "¥": "JPY",
  "₹": "INR",
  "CA$": "CAD",
  "A$": "AUD",
}

CURRENCY_CODE_TO_SYMBOL = {code: symbol for symbol, code in CURRENCY_SYMBOL_TO_CODE.items()}

PREFIX_PATTERN = re.compile(r"^(buy|get|shop|new|hot|sale|best|top|premium|official)\s+", re.IGNORECASE)
SUFFIX_PATTERN = re.compile(r"\s+(sale|discount|deal|clearance|online|only|now|today|exclusive)$", re.IGNORECASE)
NUMBER_PATTERN = re.compile(r"\d+(\.\d+)?")


def extract_price(price_text: str) -> float:
  """
  Parse the first number in a price string.

  Commas are read as decimal separators, so "$1,234.56" gives 1.234.
  Returns 0.0 when no digits are present.
  """
  numeric_string = re.sub(r"[^0-9.,]", "", price_text or "")
  formatted_string = numeric_string.replace(",", ".")

  match = NUMBER_PATTERN.search(formatted_string)
  if match:
    return float(match.group(0))
  return 0.0


def extract_currency(price_text: str) -> str:
  """First known currency symbol contained in the text, or ''."""
  for symbol in SYMBOL_SCAN_ORDER:
    if symbol in (price_text or ""):
      return symbol
  return ""


def map_currency_symbol_to_code(symbol: str) -> str:
  return CURRENCY_SYMBOL_TO_CODE.get(symbol, "USD")


def resolve_currency(price_text: str) -> str:
  """Currency code for a price string, USD when no symbol is found."""
  symbol = extract_currency(price_text)
  return map_currency_symbol_to_code(symbol) if symbol else "USD"


def format_price(price: float, currency: str) -> str:
  """'$599.99', '₹1,299.00', or '12.50 CHF' for codes without a known symbol."""
  symbol = CURRENCY_CODE_TO_SYMBOL.get((currency or "").upper())
  amount = f"{_numeric_price(price):,.2f}"
  if symbol:
    return f"{symbol}{amount}"
  return f"{amount} {currency}".strip()



def clean_product_name(name: str) -> str:
  """Collapse whitespace, then drop one leading and one trailing marketing word."""
  cleaned_name = re.sub(r"\s+", " ", name or "").strip()
  cleaned_name = PREFIX_PATTERN.sub("", cleaned_name, count=1)
  cleaned_name = SUFFIX_PATTERN.sub("", cleaned_name, count=1)
  return cleaned_name


def _field(product: Any, name: str, alias: str = None):
  if isinstance(product, dict):
    return product.get(alias or name, product.get(name))
  return getattr(product, name, None)


def _numeric_price(price: Any) -> float:
  if isinstance(price, str):
    try:
      return float(price)
    except ValueError:
      log.debug(f"Unparsable price '{price}' sorted as 0")
      return 0.0
  return price if price is not None else 0.0


def remove_duplicates(products: Sequence[ProductRecord]) -> List[ProductRecord]:
  """
  Keep the first record for each (productName, price, website) key.
  Survivors keep their first-seen order.
  """
  unique_products = dict()

  for product in products:
    key = (
      _field(product, "product_name", "productName"),
      _numeric_price(_field(product, "price")),
      _field(product, "website"),
    )
    if key not in unique_products:
      unique_products[key] = product

  return list(unique_products.values())


def sort_products_by_price(products: Sequence[ProductRecord]) -> List[ProductRecord]:
  """Stable ascending sort by price; returns a new list."""
  return sorted(products, key=lambda p: _numeric_price(_field(p, "price")))


def normalize_query(query: str) -> str:
  normalized = re.sub(r"[^A-Za-z0-9_\s]", "", (query or "").lower())
  return re.sub(r"\s+", " ", normalized).strip()
