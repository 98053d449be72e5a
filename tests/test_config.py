from pathlib import Path

from baby_tracker.config import Settings, get_display_config, load_yaml_config
from baby_tracker.persistence import RedisSettingsStore, SettingsStore, create_stores


def test_settings_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("DB_PATH", str(tmp_path / "x.db"))
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.delenv("REDIS_URL", raising=False)
    settings = Settings()
    assert settings.db_path == tmp_path / "x.db"
    assert settings.log_level == "DEBUG"
    assert settings.redis_url is None


def test_missing_yaml_is_empty(tmp_path):
    assert load_yaml_config(tmp_path / "nope.yaml") == {}


def test_display_config_merges_file_over_defaults(tmp_path):
    (tmp_path / "tracker.yaml").write_text("chart:\n  date_format: '%m/%d'\n")
    config = get_display_config(str(tmp_path))
    assert config["chart"]["date_format"] == "%m/%d"
    assert config["chart"]["growth_date_format"] == "%b %d"
    assert config["profile"]["default_name"] == "Baby"


def test_bundled_display_config_loads():
    config_dir = Path(__file__).parent.parent / "config"
    assert get_display_config(str(config_dir))["chart"]["date_format"] == "%d %b"


def test_create_stores_picks_backend(tmp_path):
    file_settings = Settings(db_path=tmp_path / "a.db", data_dir=tmp_path / "data", redis_url=None)
    _, settings_store = create_stores(file_settings)
    assert isinstance(settings_store, SettingsStore)

    redis_settings = Settings(db_path=tmp_path / "a.db", redis_url="redis://localhost:6379/0")
    _, settings_store = create_stores(redis_settings)
    assert isinstance(settings_store, RedisSettingsStore)
