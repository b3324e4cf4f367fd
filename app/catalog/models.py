"""Catalog snapshot models consumed by the cache TTL logic."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date


@dataclass(slots=True)
class InventoryRecord:
    available_to_sell: float


@dataclass(slots=True)
class AvailabilitySnapshot:
    is_orderable: bool
    time_to_out_of_stock: float | None = None
    inventory_record: InventoryRecord | None = None
    sku_coverage: float | None = None


@dataclass(slots=True)
class ActiveDataSnapshot:
    sales_velocity_week: float | None = None
    sales_velocity_month: float | None = None


@dataclass(slots=True)
class Campaign:
    campaign_id: str
    start_date: date | None = None
    last_modified: date | None = None


@dataclass(slots=True)
class Promotion:
    promotion_id: str
    start_date: date | None = None
    campaign: Campaign | None = None


@dataclass(slots=True)
class ProductSnapshot:
    product_id: str
    availability: AvailabilitySnapshot | None = None
    active_data: ActiveDataSnapshot | None = None
    promotions: list[Promotion] = field(default_factory=list)
    is_variant: bool = False
    is_variation_group: bool = False
    is_master: bool = False
    master: ProductSnapshot | None = None
    name: str | None = None
    category_id: str | None = None


@dataclass(slots=True)
class SearchResultSnapshot:
    query: str
    hits: list[ProductSnapshot] = field(default_factory=list)
