import pytest
from pydantic import ValidationError

from nexow.config import Settings, settings
from nexow.domain.errors import ConfigError
from nexow.domain.models import EngineConfig, Mode, StrategyKind


def test_from_settings_uses_defaults_and_overrides():
    cfg = EngineConfig.from_settings(symbols=["AAPL", "MSFT"], bar_count=42)

    assert cfg.symbols == ("AAPL", "MSFT")
    assert cfg.symbol == "AAPL"
    assert cfg.bar_count == 42
    assert cfg.rf_trees == settings.RF_TREES
    assert cfg.train_split == settings.TRAIN_SPLIT


def test_from_request_maps_fields_and_mode():
    cfg = EngineConfig.from_request({
        "symbols": ["BTC"],
        "bar_interval_ms": 250,
        "length_bars": 300,
        "rf_trees": 10,
        "rf_max_depth": 4,
        "train_split": 0.6,
        "mode": "backtest",
        "starting_cash": 2500,
    })

    assert cfg.symbols == ("BTC",)
    assert (cfg.bar_interval_ms, cfg.bar_count, cfg.rf_trees, cfg.rf_max_depth) == (250, 300, 10, 4)
    assert cfg.train_split == pytest.approx(0.6)
    assert cfg.mode is Mode.BACKTEST
    assert cfg.starting_cash == 2500.0
    assert cfg.strategy is StrategyKind.FOREST


@pytest.mark.parametrize("raw,expected", [
    ("forwardtest", Mode.FORWARDTEST),
    ("Backtest", Mode.BACKTEST),
    ("live", Mode.SIMULATE),
    ("", Mode.SIMULATE),
])
def test_mode_parse(raw, expected):
    assert Mode.parse(raw) is expected


def test_from_request_rejects_malformed_values():
    with pytest.raises(ConfigError):
        EngineConfig.from_request({"length_bars": "many"})
    with pytest.raises(ConfigError):
        EngineConfig.from_request({"strategy": "lstm"})
    # a bare string must not be split into one-letter symbols
    with pytest.raises(ConfigError):
        EngineConfig.from_request({"symbols": "AAPL"})
    with pytest.raises(ConfigError):
        EngineConfig.from_request({"symbols": ["AAPL", 7]})
    with pytest.raises(ConfigError):
        EngineConfig.from_request({"symbols": None})


def test_from_request_accepts_empty_symbol_list():
    cfg = EngineConfig.from_request({"symbols": []})

    assert cfg.symbols == ()
    assert cfg.validate().symbol == settings.DEFAULT_SYMBOL


def test_validate_accepts_empty_symbols_with_placeholder():
    cfg = EngineConfig(symbols=()).validate()

    assert cfg.symbol == settings.DEFAULT_SYMBOL


@pytest.mark.parametrize("kw", [
    {"train_split": 1.01},
    {"starting_cash": -5.0},
    {"rf_max_depth": 0},
    {"start_price": 0.0},
    {"volatility": -0.1},
])
def test_validate_rejects_out_of_range(kw):
    with pytest.raises(ConfigError):
        EngineConfig(symbols=("SIM",), **kw).validate()


def test_settings_validators(monkeypatch):
    monkeypatch.setenv("TRAIN_SPLIT", "1.5")
    with pytest.raises(ValidationError):
        Settings()

    monkeypatch.setenv("TRAIN_SPLIT", "0.5")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    s = Settings()
    assert s.TRAIN_SPLIT == 0.5
    assert s.LOG_LEVEL == "DEBUG"

    monkeypatch.setenv("LOG_LEVEL", "chatty")
    with pytest.raises(ValidationError):
        Settings()


def test_volatility_bounds_match_engine_config(monkeypatch):
    monkeypatch.setenv("VOLATILITY", "0")
    s = Settings()
    assert s.VOLATILITY == 0.0
    assert EngineConfig(symbols=("SIM",), volatility=s.VOLATILITY).validate()

    monkeypatch.setenv("VOLATILITY", "-0.01")
    with pytest.raises(ValidationError):
        Settings()
    with pytest.raises(ConfigError):
        EngineConfig(symbols=("SIM",), volatility=-0.01).validate()

    monkeypatch.setenv("VOLATILITY", "0.01")
    monkeypatch.setenv("START_PRICE", "0")
    with pytest.raises(ValidationError):
        Settings()
