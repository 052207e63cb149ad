from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _now() -> datetime:
    return datetime.now(timezone.utc)


class DatedPrice(BaseModel):
    date: datetime
    price: float


# --- public.products ---
# Column names are camelCase to match the table. Columns this model does not
# declare are carried through untouched so a write never drops them.
class Product(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str                      # PRIMARY KEY, site-specific stable key
    name: str
    ingredients: List[str] = Field(default_factory=list)
    category: Optional[List[str]] = None
    currentPrice: Optional[float] = None
    unitPrice: Optional[float] = None
    size: Optional[str] = None
    unitName: Optional[str] = None
    originalUnitQuantity: Optional[float] = None
    sourceSite: Optional[str] = None
    priceHistory: Optional[List[DatedPrice]] = None
    lastUpdated: datetime = Field(default_factory=_now)
    lastChecked: datetime = Field(default_factory=_now)

    @field_validator("ingredients", mode="before")
    @classmethod
    def _null_ingredients(cls, value):
        return [] if value is None else value

    def with_price_defaults(self) -> "Product":
        """Copy with `currentPrice` and `priceHistory` filled in when missing."""
        return self.model_copy(
            update={
                "currentPrice": self.currentPrice or 0,
                "priceHistory": self.priceHistory or [],
            }
        )

    def to_record(self) -> Dict[str, Any]:
        """
        JSON-safe row for the products table.

        Optional columns that were never supplied are left out, so an upsert
        keeps whatever the stored row already holds for them.
        """
        record = self.model_dump(mode="json")
        for name in type(self).model_fields:
            if name not in self.model_fields_set and getattr(self, name) is None:
                record.pop(name, None)
        return record


class UpsertResponse(str, Enum):
    NewProduct = "NewProduct"
    PriceChanged = "PriceChanged"
    InfoChanged = "InfoChanged"
    AlreadyUpToDate = "AlreadyUpToDate"
    Failed = "Failed"


class ProductResponse(NamedTuple):
    upsert_type: UpsertResponse
    product: Product
