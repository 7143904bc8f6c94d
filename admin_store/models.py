"""Admin store domain models.

Records are persisted as camelCase JSON objects. These models validate what
callers hand to the store, including restored snapshots; the store itself
keeps and returns plain dicts.
"""

from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

PRODUCT_CATEGORIES = (
    "Electronics",
    "Clothing",
    "Food & Beverage",
    "Sports",
    "Home & Garden",
)

ProductCategory = Literal["Electronics", "Clothing", "Food & Beverage", "Sports", "Home & Garden"]
ProductStatus = Literal["active", "inactive"]
OrderStatus = Literal["pending", "shipped", "delivered", "cancelled"]
CustomerStatus = Literal["active", "inactive"]

ORDER_STATUSES = ("pending", "shipped", "delivered", "cancelled")

# Sentinel filter value that disables an exact-match filter
ALL = "all"


class RecordModel(BaseModel):
    """Base for persisted record shapes (camelCase on the wire, extras kept)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    def to_record(self, partial: bool = False) -> dict:
        """Dump to the persisted camelCase dict.

        A partial dump keeps exactly the fields the caller supplied, explicit
        nulls included, so a shallow merge can clear an optional field.
        """
        if partial:
            return self.model_dump(by_alias=True, exclude_unset=True)
        return self.model_dump(by_alias=True, exclude_none=True)


# =============================================================================
# Products
# =============================================================================


class Product(RecordModel):
    """Persisted product record."""

    id: str
    name: str
    description: str = ""
    category: ProductCategory
    price: float = Field(..., ge=0)
    stock: int = Field(..., ge=0)
    status: ProductStatus = "active"
    image: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ProductCreate(RecordModel):
    """Request model for adding a product."""

    name: str = Field(..., min_length=1, description="Product name")
    description: str = Field("", description="Free-text description")
    category: ProductCategory = Field(..., description="One of PRODUCT_CATEGORIES")
    price: float = Field(..., ge=0, description="Unit price")
    stock: int = Field(0, ge=0, description="Units in stock")
    status: ProductStatus = Field("active", description="active or inactive")
    image: Optional[str] = Field(None, description="Image URL")


class ProductUpdate(RecordModel):
    """Partial update for a product. Only fields that were set are merged."""

    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    category: Optional[ProductCategory] = None
    price: Optional[float] = Field(None, ge=0)
    stock: Optional[int] = Field(None, ge=0)
    status: Optional[ProductStatus] = None
    image: Optional[str] = None


# =============================================================================
# Orders
# =============================================================================


class OrderItem(RecordModel):
    """Line item inside an order."""

    product_name: str
    quantity: int = Field(..., ge=1)
    price: float = Field(..., ge=0)


class Order(RecordModel):
    """Persisted order record.

    ``total`` is maintained by whoever writes the order; the store never
    recomputes it from ``items``.
    """

    id: str
    customer_name: str
    customer_email: str
    order_date: str
    status: OrderStatus
    items: list[OrderItem] = Field(..., min_length=1)
    total: float = Field(..., ge=0)
    shipping_address: str = ""
    delivery_date: Optional[str] = None
    updated_at: Optional[str] = None


class OrderUpdate(RecordModel):
    """Partial update for an order."""

    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    status: Optional[OrderStatus] = None
    items: Optional[list[OrderItem]] = Field(None, min_length=1)
    total: Optional[float] = Field(None, ge=0)
    shipping_address: Optional[str] = None


# =============================================================================
# Customers
# =============================================================================


class Customer(RecordModel):
    """Persisted customer record."""

    id: str
    name: str
    email: str
    phone: str = ""
    address: str = ""
    join_date: str
    status: CustomerStatus = "active"
    total_orders: int = Field(0, ge=0)
    total_spent: float = Field(0, ge=0)


# =============================================================================
# Analytics
# =============================================================================


class DailyPoint(RecordModel):
    """One point of a daily time series."""

    date: str
    value: float


class DailySeries(RecordModel):
    """Daily time series wrapper (``{"daily": [...]}``)."""

    daily: list[DailyPoint] = Field(default_factory=list)


class CategoryShare(RecordModel):
    """Sales share of a product category with its chart color."""

    name: str
    value: float
    color: str


class Kpis(RecordModel):
    """Key performance indicators derived from live orders and customers."""

    total_revenue: float = 0
    total_orders: int = 0
    active_customers: int = 0
    conversion_rate: float = 0


class AnalyticsSnapshot(RecordModel):
    """Seeded analytics document plus the transient KPIs."""

    revenue: DailySeries = Field(default_factory=DailySeries)
    orders: DailySeries = Field(default_factory=DailySeries)
    categories: list[CategoryShare] = Field(default_factory=list)
    kpis: Optional[Kpis] = None


# =============================================================================
# Queries and bulk payloads
# =============================================================================


class ListFilters(BaseModel):
    """Filter options accepted by every list operation."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    search: Optional[str] = None
    category: Optional[str] = None
    status: Optional[str] = None
    sort_by: Optional[str] = Field(None, alias="sortBy")
    sort_order: Optional[str] = Field(None, alias="sortOrder")

    @property
    def descending(self) -> bool:
        return self.sort_order == "desc"


class ExportSnapshot(BaseModel):
    """Point-in-time dump of every collection, as produced by export."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    products: Optional[list[Product]] = None
    orders: Optional[list[Order]] = None
    customers: Optional[list[Customer]] = None
    analytics: Optional[AnalyticsSnapshot] = None
    export_date: Optional[str] = Field(None, alias="exportDate")

    def collection(self, name: str) -> Optional[Union[list[dict], dict]]:
        """Get one section back in its persisted shape, or None if absent.

        Transient KPIs are dropped from the analytics section.
        """
        value = getattr(self, name)
        if value is None:
            return None
        if isinstance(value, AnalyticsSnapshot):
            record = value.to_record(partial=True)
            record.pop("kpis", None)
            return record
        return [item.to_record(partial=True) for item in value]
