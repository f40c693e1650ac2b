# price_compare/frontend.py

import streamlit as st
import requests
import json
import pandas as pd
from typing import Dict, List

from price_compare.api_client import ApiClient, is_error_response
from price_compare.helpers import format_price
from price_compare.logger import configure_logging, get_logger

configure_logging()

log = get_logger(__name__)
log.info("Streamlit frontend is starting...")

# Used when the backend cannot be reached for the country list
DEFAULT_COUNTRIES = {
	"US": {"code": "US", "name": "United States", "currency": "USD", "websites": []},
	"UK": {"code": "UK", "name": "United Kingdom", "currency": "GBP", "websites": []},
	"IN": {"code": "IN", "name": "India", "currency": "INR", "websites": []},
	"CA": {"code": "CA", "name": "Canada", "currency": "CAD", "websites": []},
	"AU": {"code": "AU", "name": "Australia", "currency": "AUD", "websites": []},
	"DE": {"code": "DE", "name": "Germany", "currency": "EUR", "websites": []},
}

NETWORK_ERROR_MESSAGE = "Failed to fetch product data. Please check your internet connection and try again. If the problem persists, the backend API key may be missing or invalid."


@st.cache_resource
def get_client() -> ApiClient:
	return ApiClient()


def main():
	st.set_page_config(
	page_title="Price Comparison",
	page_icon="🛒",
	layout="centered"
	)

	st.title("Price Comparison")
	st.caption("Compare prices across popular retailers in your country")

	initialize_sessions()

	countries = load_countries()
	codes = list(countries.keys())

	col1, col2 = st.columns([1, 3])
	with col1:
		country = st.selectbox(
			"Country",
			codes,
			index=codes.index(st.session_state.country) if st.session_state.country in codes else 0,
			format_func=lambda code: f"{countries[code]['name']} ({countries[code]['currency']})",
			key="country_select",
		)
		st.session_state.country = country
	with col2:
		query = st.text_input("Search product", placeholder="Ex: iphone 15", key="query")

	websites = countries.get(country, {}).get("websites") or []
	if websites:
		st.caption("Searching: " + ", ".join(websites))

	if st.button("Search", type="primary"):
		run_search(query, country)

	show_results()


def load_countries() -> Dict[str, dict]:
	if not st.session_state.countries:
		countries = get_client().get_countries()
		if not countries:
			log.warning("Country list unavailable from API, using built-in defaults.")
			countries = DEFAULT_COUNTRIES
		st.session_state.countries = countries
	return st.session_state.countries


def run_search(query: str, country: str):
	log.info(f"Search button clicked. Query: '{query}', country: {country}")
	if not query.strip():
		st.warning("Please type a product!")
		log.warning("User attempted search with empty query.")
		return

	st.session_state.error = None
	st.session_state.products = []

	with st.spinner("Searching..."):
		try:
			results = get_client().search_products(query.strip(), country, raise_errors=True)
		except (requests.exceptions.RequestException, ValueError) as e:
			st.session_state.error = NETWORK_ERROR_MESSAGE
			log.exception(f"Streamlit search request failed for '{query}': {e}")
			return

	# [{message: ...}] means the backend is not configured
	if is_error_response(results):
		st.session_state.error = results[0]["message"]
		log.error(f"Backend reported an error for '{query}': {results[0]['message']}")
		return

	st.session_state.products = results
	st.session_state.last_query = query.strip()
	if not results:
		st.session_state.error = f"No products found for \"{query}\". Please try a different search query or select another country."
		log.info(f"No products found for query: '{query}'.")


def show_results():
	if st.session_state.error:
		st.error(st.session_state.error)
		return

	products = st.session_state.products
	if not products:
		st.info("No products to display. Please run a search.")
		return

	st.markdown(f"## 🔍 Results for \"{st.session_state.last_query}\"")
	st.caption(f"Found {len(products)} results sorted by price (lowest first)")

	col1, col2 = st.columns([1, 1])
	with col1:
		download_datas(products, "json")
	with col2:
		download_datas(products, "csv")

	display_products(products)


def display_products(products: List[dict]):
	"""Display products as cards."""
	for product in products:
		with st.container():
			col1, col2 = st.columns([1, 3])

			with col1:
				if product.get("imageUrl"):
					st.image(product["imageUrl"], width=150)
				else:
					st.write("🖼️ No image")

			with col2:
				st.subheader(product.get("productName", ""))
				st.caption(product.get("website", ""))

				col2_1, col2_2, col2_3 = st.columns(3)
				with col2_1:
					st.metric("Price", format_price(product.get("price", 0), product.get("currency", "USD")))
				with col2_2:
					if product.get("rating"):
						st.metric("Rating", f"{product['rating']:.1f}/5")
					else:
						st.write("Rating: Not available")
				with col2_3:
					if product.get("reviews"):
						st.metric("Reviews", f"{product['reviews']:,}")
					else:
						st.write("Reviews: Not available")

				if product.get("availability"):
					st.caption(product["availability"])
				if product.get("link"):
					st.link_button(f"View on {product.get('website') or 'store'}", product["link"])
			st.divider()


def download_datas(products: List[dict], data_type: str):
	"""
	Download button for the current results.

	Args:
		products: List[dict] : Product records as returned by the API
		data_type: str : 'json' or 'csv'
	"""
	if data_type == "json":
		st.download_button(
			label="📥 Download as JSON",
			data=json.dumps(products, indent=2, ensure_ascii=False),
			file_name="products.json",
			mime="application/json",
		)
	else:
		st.download_button(
			label="📥 Download as CSV",
			data=pd.DataFrame(products).to_csv(index=False).encode("utf-8"),
			file_name="products.csv",
			mime="text/csv",
		)


def initialize_sessions():
	"""Initialize session state variables."""
	if "country" not in st.session_state:
		st.session_state.country = "US"
	if "countries" not in st.session_state:
		st.session_state.countries = None
	if "products" not in st.session_state:
		st.session_state.products = []
	if "last_query" not in st.session_state:
		st.session_state.last_query = ""
	if "error" not in st.session_state:
		st.session_state.error = None


if __name__ == "__main__":
	main()
