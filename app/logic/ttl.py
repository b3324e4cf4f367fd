"""Dynamic cache TTL estimation.

The TTL of a product page blends three signals:

* the platform's stock-out projection for the product (short horizon),
* the hours until stock-out implied by recent sales velocity against the
  available-to-sell quantity (medium horizon),
* a shrink factor when a discount promotion on the product started today.

Every estimate is in hours internally and returned as whole minutes.
"""

from __future__ import annotations

import logging
import math
from datetime import date

import numpy as np

from app.catalog.models import ProductSnapshot, SearchResultSnapshot
from app.config import CacheConfig
from app.logic.promotions import promotion_active_today
from app.utils.dates import now_in_tz

logger = logging.getLogger(__name__)

MINUTES_PER_HOUR = 60


def to_minutes(hours: float) -> int:
    return int(round(hours * MINUTES_PER_HOUR))


def clamp_hours(hours: float, config: CacheConfig) -> float:
    return min(config.max_cache_time, max(config.min_cache_time, hours))


def fallback_ttl(config: CacheConfig) -> int:
    return to_minutes(config.fallback_cache_time)


def resolve_representative(product: ProductSnapshot) -> ProductSnapshot | None:
    """Variants and variation groups are represented by their master."""
    if product.is_variant or product.is_variation_group:
        return product.master
    return product


def projected_stock_out(product: ProductSnapshot, config: CacheConfig) -> float | None:
    """Modifier-adjusted hours until stock-out, or None when there is no usable projection."""
    availability = product.availability
    if availability is None or not availability.is_orderable:
        return None
    if availability.time_to_out_of_stock is None:
        return None
    hours = availability.time_to_out_of_stock / config.day_modifier
    if hours == 0:
        return None
    return hours


def short_horizon(product: ProductSnapshot, config: CacheConfig) -> float | None:
    hours = projected_stock_out(product, config)
    if hours is None:
        return None
    return clamp_hours(math.floor(hours), config)


def daily_velocity(
    velocity: float | None,
    modifier: float,
    sku_coverage: float,
    config: CacheConfig,
) -> float | None:
    """Units per hour spread over a whole day, corrected for sold-out variants."""
    if not velocity:
        return None
    active_share = config.active_hours_in_day / 24
    return (velocity / active_share) * modifier / sku_coverage


def medium_horizon(
    product: ProductSnapshot,
    representative: ProductSnapshot,
    config: CacheConfig,
) -> float | None:
    """Hours until the available-to-sell quantity runs out at the recent sales rate."""
    if product.is_master and representative.is_master:
        return None
    availability = representative.availability
    if availability is None or availability.inventory_record is None:
        return None
    active_data = product.active_data
    if active_data is None:
        return None

    sku_coverage = 1.0
    if representative.is_master and availability.sku_coverage:
        sku_coverage = availability.sku_coverage

    week = daily_velocity(active_data.sales_velocity_week, config.week_modifier, sku_coverage, config)
    month = daily_velocity(active_data.sales_velocity_month, config.month_modifier, sku_coverage, config)
    if not week or not month:
        return None
    return availability.inventory_record.available_to_sell / float(np.mean([week, month]))


def promotion_factor(product: ProductSnapshot, config: CacheConfig, now: date) -> float:
    if promotion_active_today(product, now):
        return config.promotion_influence
    return 1.0


def estimate_product_ttl(
    product: ProductSnapshot | None,
    config: CacheConfig,
    now: date | None = None,
) -> int:
    """Minutes a page for ``product`` may stay cached."""
    if product is None:
        logger.debug("No product; using fallback cache time")
        return fallback_ttl(config)

    representative = resolve_representative(product)
    if representative is None:
        logger.debug("Product %s has no master; using fallback cache time", product.product_id)
        return fallback_ttl(config)

    short = short_horizon(representative, config)
    if short is None:
        logger.debug(
            "Product %s is not orderable or has no stock-out projection; using fallback cache time",
            product.product_id,
        )
        return fallback_ttl(config)

    medium = medium_horizon(product, representative, config)
    factor = promotion_factor(representative, config, now or now_in_tz())

    if medium is not None:
        hours = clamp_hours(math.floor(((short + medium) / 2) * factor), config)
    else:
        # Not clamped again after the promotion factor.
        hours = math.floor(short * factor)
    logger.debug(
        "Product %s: short=%s medium=%s factor=%s -> %sh",
        product.product_id,
        short,
        medium,
        factor,
        hours,
    )
    return to_minutes(hours)


def estimate_search_ttl(result_set: SearchResultSnapshot | None, config: CacheConfig) -> int:
    """Minutes a search page may stay cached; the most volatile hit decides."""
    if result_set is None or not result_set.hits:
        return fallback_ttl(config)
    projections = []
    for hit in result_set.hits:
        representative = resolve_representative(hit)
        if representative is None:
            continue
        hours = projected_stock_out(representative, config)
        if hours is not None and hours > 0:
            projections.append(hours)
    if not projections:
        logger.debug("Search %r has no stock-out projections; using fallback cache time", result_set.query)
        return fallback_ttl(config)
    hours = clamp_hours(math.floor(float(np.min(projections))), config)
    return to_minutes(hours)
