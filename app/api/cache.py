"""Response cache middleware driven by the dynamic TTL estimate."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from fastapi import Response

from app.catalog.models import ProductSnapshot, SearchResultSnapshot
from app.config import CacheConfig
from app.logic.ttl import estimate_product_ttl, estimate_search_ttl


@dataclass(slots=True)
class CacheDirective:
    minutes: int
    personalized_by_price_promotion: bool

    def headers(self) -> dict[str, str]:
        return {
            "Cache-Control": f"public, max-age={self.minutes * 60}",
            "X-Cache-Period": str(self.minutes),
            "X-Cache-Period-Unit": "minutes",
            "X-Personalized-By-Price-Promotion": "true" if self.personalized_by_price_promotion else "false",
        }

    def apply(self, response: Response) -> None:
        for name, value in self.headers().items():
            response.headers[name] = value


def apply_dynamic_inventory_sensitive_cache(
    response: Response,
    product: ProductSnapshot | None,
    config: CacheConfig,
    now: date | None = None,
) -> CacheDirective | None:
    if product is None:
        return None
    # The TTL is already shortened for fresh promotions, so the cache must not vary by them.
    directive = CacheDirective(
        minutes=estimate_product_ttl(product, config, now),
        personalized_by_price_promotion=True,
    )
    directive.apply(response)
    return directive


def apply_search_cache(
    response: Response,
    result_set: SearchResultSnapshot | None,
    config: CacheConfig,
) -> CacheDirective:
    directive = CacheDirective(
        minutes=estimate_search_ttl(result_set, config),
        personalized_by_price_promotion=False,
    )
    directive.apply(response)
    return directive
