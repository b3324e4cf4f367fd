"""Detection of promotions that started on the current day."""

from __future__ import annotations

from datetime import date

from app.catalog.models import ProductSnapshot, Promotion
from app.utils.dates import same_calendar_day


def promotion_start(promotion: Promotion) -> date | None:
    """First known start of a promotion: its own, its campaign's, or the campaign's last edit."""
    if promotion.start_date is not None:
        return promotion.start_date
    campaign = promotion.campaign
    if campaign is None:
        return None
    if campaign.start_date is not None:
        return campaign.start_date
    return campaign.last_modified


def promotion_active_today(product: ProductSnapshot | None, now: date) -> bool:
    if product is None:
        return False
    for promotion in product.promotions:
        start = promotion_start(promotion)
        if start is not None and same_calendar_day(start, now):
            return True
    return False
