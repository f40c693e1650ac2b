# price_compare/main.py

from fastapi import FastAPI, APIRouter, Body, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from typing import Optional

from price_compare.config import get_cors_origins
from price_compare.countries import countries_as_dict
from price_compare.models import SearchRequest
from price_compare import product_service

from price_compare.logger import configure_logging, get_logger
configure_logging()

log = get_logger(__name__)
log.info("Price Comparison API is starting...")


app = FastAPI(title="Price Comparison API",
              description="Searches country-specific retailers through SerpApi and returns normalized, deduplicated products sorted by price.",
              version="1.0.0")

app.add_middleware(
  CORSMiddleware,
  allow_origins=get_cors_origins(),
  allow_methods=["*"],
  allow_headers=["*"],
)

router = APIRouter(prefix="/api/products", tags=["products"])


def _server_error(exc: Exception) -> JSONResponse:
  return JSONResponse(status_code=500, content={"message": "Server error", "error": str(exc)})


def _missing_fields() -> JSONResponse:
  return JSONResponse(status_code=400, content={"message": "Country and query are required"})


@router.post("/search")
def search_products(payload: Optional[SearchRequest] = Body(default=None)):
  """
  Search products for {"country": ..., "query": ...}.
  Returns records sorted by price, or [{"message": ...}] when the SerpApi key is missing.
  """
  if payload is None or not payload.is_complete():
    log.warning(f"[API] Rejected search request with missing fields: {payload}")
    return _missing_fields()

  log.info(f"[API] Received search request for \"{payload.query}\" in {payload.country}")
  try:
    products = product_service.search_products(payload.query, payload.country)
  except Exception as e:
    log.error(f"[API] Error in search_products for '{payload.query}': {e}", exc_info=True)
    return _server_error(e)

  log.info(f"[API] Returning {len(products)} products for \"{payload.query}\" in {payload.country}")
  return JSONResponse(status_code=200, content=products)


@router.get("/countries")
def get_supported_countries():
  """Country code -> {code, name, currency, websites}."""
  return countries_as_dict()


app.include_router(router)


@app.get("/health")
def healthcheck():
  return {"status": "ok", "message": "Server is running"}


@app.get("/")
def root():
  return {
    "message": "Price Comparison API",
    "version": "1.0.0",
    "endpoints": {
      "search": "POST /api/products/search",
      "countries": "GET /api/products/countries",
    },
  }


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
  # the search route answers every unusable body with its 400
  if request.url.path == "/api/products/search":
    log.warning(f"[API] Rejected malformed search request: {exc.errors()}")
    return _missing_fields()
  return await request_validation_exception_handler(request, exc)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    log.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return _server_error(exc)
