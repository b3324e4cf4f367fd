from datetime import date

import pendulum
import pytest

from app.catalog import build_catalog
from app.catalog.models import ActiveDataSnapshot, AvailabilitySnapshot, InventoryRecord, ProductSnapshot
from app.config import CacheConfig

NOW = pendulum.datetime(2026, 10, 17, 11, 0, tz="America/Los_Angeles")


@pytest.fixture()
def now():
    return NOW


@pytest.fixture()
def config():
    return CacheConfig(
        stock_levels_change_often=False,
        min_cache_time=0.5,
        max_cache_time=24,
        active_hours_in_day=14,
        day_modifier=1,
        week_modifier=1,
        month_modifier=1,
        promotion_influence=0.5,
    )


@pytest.fixture()
def product():
    return ProductSnapshot(
        product_id="P100",
        availability=AvailabilitySnapshot(
            is_orderable=True,
            time_to_out_of_stock=10,
            inventory_record=InventoryRecord(available_to_sell=20),
        ),
        active_data=ActiveDataSnapshot(sales_velocity_week=None, sales_velocity_month=None),
    )


@pytest.fixture()
def catalog():
    return build_catalog(
        {
            "campaigns": [
                {"id": "autumn", "start_date": date(2026, 9, 1)},
            ],
            "products": [
                {
                    "id": "canvas-tote",
                    "name": "Canvas Tote",
                    "category": "bags",
                    "availability": {"orderable": True, "time_to_out_of_stock": 10, "available_to_sell": 20},
                },
                {
                    "id": "wool-scarf",
                    "name": "Wool Scarf",
                    "category": "accessories",
                    "availability": {"orderable": True, "time_to_out_of_stock": 8, "available_to_sell": 200},
                    "active_data": {"sales_velocity_week": 50, "sales_velocity_month": 50},
                    "promotions": [{"id": "scarf-flash", "start_date": NOW.date().isoformat()}],
                },
                {
                    "id": "oxford-shirt",
                    "name": "Oxford Shirt",
                    "category": "tops",
                    "master": True,
                    "availability": {"orderable": True, "time_to_out_of_stock": 12},
                    "promotions": [{"id": "shirt-autumn", "campaign": "autumn"}],
                },
                {
                    "id": "oxford-shirt-blue-m",
                    "name": "Oxford Shirt Blue M",
                    "category": "tops",
                    "variant": True,
                    "master_id": "oxford-shirt",
                },
                {
                    "id": "leather-belt",
                    "name": "Leather Belt",
                    "category": "accessories",
                    "availability": {"orderable": False, "time_to_out_of_stock": 0},
                },
            ],
        }
    )
