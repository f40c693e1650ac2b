# tests/test_helpers.py

import logging
import pytest

from price_compare.helpers import (
  extract_price, extract_currency, map_currency_symbol_to_code, resolve_currency,
  clean_product_name, remove_duplicates, sort_products_by_price, format_price, normalize_query,
)
from price_compare.models import ProductRecord

test_log = logging.getLogger("tests")


def record(name, price, website="amazon", **extra):
  return ProductRecord(product_name=name, price=price, website=website, **extra)


@pytest.mark.parametrize("text, expected", [
  ("€599.99", 599.99),
  ("$1,234.56", 1.234),      # comma read as a decimal separator
  ("1,99 €", 1.99),
  ("$25", 25.0),
  ("Free", 0.0),
  ("", 0.0),
])
def test_extract_price(text, expected):
  assert extract_price(text) == pytest.approx(expected)


def test_extract_price_none_is_zero():
  assert extract_price(None) == 0.0


@pytest.mark.parametrize("text, expected", [
  ("CA$49.99", "CA$"),
  ("A$19.00", "A$"),
  ("$5", "$"),
  ("€5", "€"),
  ("£5", "£"),
  ("¥500", "¥"),
  ("₹1299", "₹"),
  ("€5 or $5", "$"),
  ("49.99", ""),
])
def test_extract_currency(text, expected):
  assert extract_currency(text) == expected


def test_map_currency_symbol_to_code():
  assert map_currency_symbol_to_code("CA$") == "CAD"
  assert map_currency_symbol_to_code("A$") == "AUD"
  assert map_currency_symbol_to_code("£") == "GBP"
  assert map_currency_symbol_to_code("") == "USD"
  assert map_currency_symbol_to_code("CHF") == "USD"


def test_resolve_currency():
  assert resolve_currency("₹2,499") == "INR"
  assert resolve_currency("12.00") == "USD"


@pytest.mark.parametrize("name, expected", [
  ("  Buy   Awesome Widget Sale ", "Awesome Widget"),
  ("OFFICIAL Headphones X2", "Headphones X2"),
  ("Headphones X2 Exclusive", "Headphones X2"),
  ("Best Top Phone", "Top Phone"),          # one prefix only
  ("Phone Deal Now", "Phone Deal"),          # one suffix only
  ("Sale", "Sale"),                          # a lone word is kept
  ("Bestseller Lamp", "Bestseller Lamp"),    # whole words only
])
def test_clean_product_name(name, expected):
  assert clean_product_name(name) == expected


def test_remove_duplicates_keeps_first():
  first = record("Widget", 10, image_url="https://img/1.jpg")
  second = record("Widget", 10, image_url="https://img/2.jpg")
  other = record("Widget", 10, website="walmart")

  result = remove_duplicates([first, other, second])

  assert len(result) == 2
  assert result[0].image_url == "https://img/1.jpg"
  assert result[1].website == "walmart"


def test_remove_duplicates_is_case_sensitive():
  result = remove_duplicates([record("widget", 10), record("Widget", 10)])
  assert len(result) == 2


def test_sort_products_by_price():
  products = [record("c", 30), record("a", 10), record("b", 20)]
  result = sort_products_by_price(products)
  assert [p.price for p in result] == [10, 20, 30]
  # input untouched
  assert [p.price for p in products] == [30, 10, 20]


def test_sort_is_stable_for_equal_prices():
  products = [record("first", 5), record("second", 5), record("cheap", 1), record("third", 5)]
  result = sort_products_by_price(products)
  assert [p.product_name for p in result] == ["cheap", "first", "second", "third"]


def test_sort_parses_string_prices():
  products = [{"productName": "a", "price": "20.5"}, {"productName": "b", "price": 3}, {"productName": "c", "price": "n/a"}]
  result = sort_products_by_price(products)
  assert [p["productName"] for p in result] == ["c", "b", "a"]
  test_log.info("test_sort_parses_string_prices completed successfully.")


def test_format_price():
  assert format_price(599.99, "USD") == "$599.99"
  assert format_price(1299, "INR") == "₹1,299.00"
  assert format_price(12.5, "CHF") == "12.50 CHF"


def test_normalize_query():
  assert normalize_query("  iPhone-15   Pro!! ") == "iphone15 pro"
