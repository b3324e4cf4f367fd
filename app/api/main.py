"""FastAPI application serving catalog pages with dynamic cache headers."""

from __future__ import annotations

import functools
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Mapping

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException, Query, Response
from pydantic import BaseModel

from app.api.cache import apply_dynamic_inventory_sensitive_cache, apply_search_cache
from app.catalog import load_catalog, search_catalog
from app.catalog.models import ProductSnapshot
from app.config import CacheConfig, ConfigError, ConfigStore
from app.utils.dates import now_in_tz

logger = logging.getLogger(__name__)

config_store = ConfigStore()


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    load_dotenv()
    config_store.get()
    yield


app = FastAPI(title="Dynamic Cache TTL API", lifespan=lifespan)


class ProductPage(BaseModel):
    product_id: str
    name: str | None
    cache_minutes: int
    personalized_by_price_promotion: bool


class SearchPage(BaseModel):
    query: str
    product_ids: list[str]
    cache_minutes: int


class ConfigResponse(BaseModel):
    min_cache_time: float
    max_cache_time: float
    stock_levels_change_often: bool


def get_config() -> CacheConfig:
    return config_store.get()


@functools.lru_cache(maxsize=1)
def get_catalog() -> Mapping[str, ProductSnapshot]:
    return load_catalog()


def _lookup(catalog: Mapping[str, ProductSnapshot], product_id: str) -> ProductSnapshot:
    product = catalog.get(product_id)
    if product is None:
        logger.info("Unknown product %s", product_id)
        raise HTTPException(status_code=404, detail="Product not found")
    return product


def _product_page(product: ProductSnapshot, response: Response, config: CacheConfig) -> ProductPage:
    directive = apply_dynamic_inventory_sensitive_cache(response, product, config, now_in_tz())
    return ProductPage(
        product_id=product.product_id,
        name=product.name,
        cache_minutes=directive.minutes,
        personalized_by_price_promotion=directive.personalized_by_price_promotion,
    )


@app.get("/products/{product_id}", response_model=ProductPage)
async def show(
    product_id: str,
    response: Response,
    catalog: Mapping[str, ProductSnapshot] = Depends(get_catalog),
    config: CacheConfig = Depends(get_config),
) -> ProductPage:
    return _product_page(_lookup(catalog, product_id), response, config)


@app.get("/categories/{category_id}/products/{product_id}", response_model=ProductPage)
async def show_in_category(
    category_id: str,
    product_id: str,
    response: Response,
    catalog: Mapping[str, ProductSnapshot] = Depends(get_catalog),
    config: CacheConfig = Depends(get_config),
) -> ProductPage:
    product = _lookup(catalog, product_id)
    if product.category_id != category_id:
        raise HTTPException(status_code=404, detail="Product not found in category")
    return _product_page(product, response, config)


@app.get("/products/{product_id}/quickview", response_model=ProductPage)
async def show_quick_view(
    product_id: str,
    response: Response,
    catalog: Mapping[str, ProductSnapshot] = Depends(get_catalog),
    config: CacheConfig = Depends(get_config),
) -> ProductPage:
    return _product_page(_lookup(catalog, product_id), response, config)


@app.get("/products/{product_id}/variation", response_model=ProductPage)
async def variation(
    product_id: str,
    response: Response,
    variant_id: str | None = None,
    catalog: Mapping[str, ProductSnapshot] = Depends(get_catalog),
    config: CacheConfig = Depends(get_config),
) -> ProductPage:
    product = _lookup(catalog, product_id)
    if variant_id:
        selected = _lookup(catalog, variant_id)
        if selected.master is not product:
            raise HTTPException(status_code=404, detail="Variant does not belong to product")
        product = selected
    return _product_page(product, response, config)


@app.get("/search", response_model=SearchPage)
async def search(
    response: Response,
    q: str = Query(..., min_length=1),
    catalog: Mapping[str, ProductSnapshot] = Depends(get_catalog),
    config: CacheConfig = Depends(get_config),
) -> SearchPage:
    result_set = search_catalog(catalog, q)
    directive = apply_search_cache(response, result_set, config)
    return SearchPage(
        query=q,
        product_ids=[hit.product_id for hit in result_set.hits],
        cache_minutes=directive.minutes,
    )


@app.post("/admin/config/reload", response_model=ConfigResponse)
async def reload_config() -> ConfigResponse:
    try:
        config = config_store.reload()
    except ConfigError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return ConfigResponse(
        min_cache_time=config.min_cache_time,
        max_cache_time=config.max_cache_time,
        stock_levels_change_often=config.stock_levels_change_often,
    )
