import pytest
from pydantic import ValidationError

from app.config import DEFAULT_CONFIG_PATH, CacheConfig, ConfigError, ConfigStore, load_config

VALID = """
stock_levels_change_often: true
min_cache_time: 0.5
max_cache_time: 12
active_hours_in_day: 14
day_modifier: 1.2
week_modifier: 0.9
month_modifier: 1.1
promotion_influence: 0.5
"""


def _write(tmp_path, body, name="cache.yml"):
    path = tmp_path / name
    path.write_text(body)
    return path


def test_default_config_document():
    config = load_config(DEFAULT_CONFIG_PATH)
    assert config.min_cache_time == 1
    assert config.max_cache_time == 24
    assert config.fallback_cache_time == 24


def test_load_from_file(tmp_path):
    config = load_config(_write(tmp_path, VALID))
    assert config.stock_levels_change_often
    assert config.day_modifier == 1.2
    assert config.fallback_cache_time == 0.5


def test_path_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("CACHE_CONFIG_PATH", str(_write(tmp_path, VALID)))
    assert load_config().max_cache_time == 12


def test_empty_document_uses_defaults(tmp_path):
    config = load_config(_write(tmp_path, ""))
    assert config == CacheConfig()


@pytest.mark.parametrize(
    "body",
    [
        "min_cache_time: 5\nmax_cache_time: 2\n",
        "min_cache_time: 0\n",
        "promotion_influence: 1.5\n",
        "promotion_influence: 0\n",
        "active_hours_in_day: 30\n",
        "week_modifier: -1\n",
        "short_cache_time: 1\n",
        "- min_cache_time\n",
        "min_cache_time: [1\n",
    ],
)
def test_invalid_documents_rejected(tmp_path, body):
    with pytest.raises(ConfigError):
        load_config(_write(tmp_path, body))


def test_missing_file_rejected(tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "missing.yml")


def test_config_is_immutable():
    config = CacheConfig()
    with pytest.raises(ValidationError):
        config.min_cache_time = 2


def test_store_reload_swaps_config(tmp_path):
    path = _write(tmp_path, VALID)
    store = ConfigStore(path)
    first = store.get()
    assert store.get() is first
    path.write_text(VALID.replace("max_cache_time: 12", "max_cache_time: 6"))
    second = store.reload()
    assert second is not first
    assert store.get().max_cache_time == 6
    assert first.max_cache_time == 12


def test_store_keeps_config_when_reload_fails(tmp_path):
    path = _write(tmp_path, VALID)
    store = ConfigStore(path)
    first = store.get()
    path.write_text("min_cache_time: 48\n")
    with pytest.raises(ConfigError):
        store.reload()
    assert store.get() is first
