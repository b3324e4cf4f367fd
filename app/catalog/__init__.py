"""Catalog snapshot loading."""

from __future__ import annotations

import os
import pathlib
from typing import Any, Mapping

import yaml

from app.catalog.models import (
    ActiveDataSnapshot,
    AvailabilitySnapshot,
    Campaign,
    InventoryRecord,
    ProductSnapshot,
    Promotion,
    SearchResultSnapshot,
)
from app.utils.dates import parse_moment

CATALOG_PATH = pathlib.Path(__file__).with_name("catalog.yml")


def catalog_path() -> pathlib.Path:
    return pathlib.Path(os.environ.get("CATALOG_PATH", CATALOG_PATH))


def load_catalog(path: pathlib.Path | None = None) -> dict[str, ProductSnapshot]:
    data = yaml.safe_load((path or catalog_path()).read_text()) or {}
    return build_catalog(data)


def build_catalog(data: Mapping[str, Any]) -> dict[str, ProductSnapshot]:
    campaigns = {item["id"]: _campaign(item) for item in data.get("campaigns") or []}
    items = data.get("products") or []
    products = {item["id"]: _product(item, campaigns) for item in items}
    for item in items:
        master_id = item.get("master_id")
        if master_id is None:
            continue
        if master_id not in products:
            raise KeyError(f"Product {item['id']} references unknown master {master_id}")
        products[item["id"]].master = products[master_id]
    return products


def search_catalog(catalog: Mapping[str, ProductSnapshot], query: str) -> SearchResultSnapshot:
    needle = query.strip().lower()
    if not needle:
        return SearchResultSnapshot(query=query)
    hits = [
        product
        for product in catalog.values()
        if not product.is_variant
        and (needle in product.product_id.lower() or needle in (product.name or "").lower())
    ]
    return SearchResultSnapshot(query=query, hits=hits)


def _campaign(item: Mapping[str, Any]) -> Campaign:
    return Campaign(
        campaign_id=item["id"],
        start_date=parse_moment(item.get("start_date")),
        last_modified=parse_moment(item.get("last_modified")),
    )


def _promotion(item: Mapping[str, Any], campaigns: Mapping[str, Campaign]) -> Promotion:
    campaign_id = item.get("campaign")
    if campaign_id is not None and campaign_id not in campaigns:
        raise KeyError(f"Promotion {item['id']} references unknown campaign {campaign_id}")
    return Promotion(
        promotion_id=item["id"],
        start_date=parse_moment(item.get("start_date")),
        campaign=campaigns.get(campaign_id) if campaign_id else None,
    )


def _product(item: Mapping[str, Any], campaigns: Mapping[str, Campaign]) -> ProductSnapshot:
    availability = None
    if "availability" in item:
        raw = item["availability"] or {}
        ats = raw.get("available_to_sell")
        availability = AvailabilitySnapshot(
            is_orderable=bool(raw.get("orderable", False)),
            time_to_out_of_stock=raw.get("time_to_out_of_stock"),
            inventory_record=InventoryRecord(available_to_sell=ats) if ats is not None else None,
            sku_coverage=raw.get("sku_coverage"),
        )
    active_data = None
    if "active_data" in item:
        raw = item["active_data"] or {}
        active_data = ActiveDataSnapshot(
            sales_velocity_week=raw.get("sales_velocity_week"),
            sales_velocity_month=raw.get("sales_velocity_month"),
        )
    return ProductSnapshot(
        product_id=item["id"],
        name=item.get("name"),
        category_id=item.get("category"),
        availability=availability,
        active_data=active_data,
        promotions=[_promotion(promo, campaigns) for promo in item.get("promotions") or []],
        is_variant=bool(item.get("variant", False)),
        is_variation_group=bool(item.get("variation_group", False)),
        is_master=bool(item.get("master", False)),
    )
