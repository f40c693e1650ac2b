# price_compare/models.py

import math
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional

from price_compare.config import MISSING_API_KEY_MESSAGE


def _number_or_zero(value) -> float:
  """Optional numeric enrichment: "1,234" reads as 1234, anything unreadable ("4.5 out of 5", "1.2K") as 0."""
  if value is None or isinstance(value, bool):
    return 0.0
  if isinstance(value, str):
    value = value.replace(",", "").strip()
  try:
    number = float(value)
  except (TypeError, ValueError):
    return 0.0
  return number if math.isfinite(number) else 0.0


class ProductRecord(BaseModel):
  """Normalized listing returned by the search pipeline. Serialized with camelCase aliases."""
  model_config = ConfigDict(populate_by_name=True)

  link: str = ""
  price: float = 0.0
  currency: str = "USD"
  product_name: str = Field(alias="productName")
  website: str = ""
  image_url: str = Field(default="", alias="imageUrl")
  rating: float = 0.0
  reviews: int = 0
  availability: str = "In Stock"

  @field_validator("price", mode="before")
  @classmethod
  def _coerce_price(cls, value):
    if value is None or value == "":
      return 0.0
    if isinstance(value, str):
      try:
        return float(value)
      except ValueError:
        return 0.0
    return value

  @field_validator("rating", mode="before")
  @classmethod
  def _coerce_rating(cls, value):
    return _number_or_zero(value)

  @field_validator("reviews", mode="before")
  @classmethod
  def _coerce_reviews(cls, value):
    return int(_number_or_zero(value))

  def to_wire(self) -> dict:
    return self.model_dump(by_alias=True, exclude_none=True)


class ErrorRecord(BaseModel):
  """Product-shaped error returned inside the result array (missing credential)."""
  message: str
  link: str = ""
  price: float = 0
  currency: str = ""
  productName: str = "Error"
  website: str = ""


class SearchRequest(BaseModel):
  country: Optional[str] = None
  query: Optional[str] = None

  def is_complete(self) -> bool:
    return bool(self.country and self.country.strip() and self.query and self.query.strip())


class SearchOutcome(BaseModel):
  """Either a product list or a configuration error, never both."""
  products: List[ProductRecord] = Field(default_factory=list)
  error: Optional[str] = None

  @classmethod
  def missing_credential(cls) -> "SearchOutcome":
    return cls(error=MISSING_API_KEY_MESSAGE)

  @property
  def ok(self) -> bool:
    return self.error is None

  def to_wire(self) -> List[dict]:
    """Array sent to clients: records, or a single ErrorRecord when error is set."""
    if self.error is not None:
      return [ErrorRecord(message=self.error).model_dump()]
    return [p.to_wire() for p in self.products]
