import pytest

from conftest import ScriptedStrategy, make_bar
from nexow.backtest.report import close_returns, events_frame, max_drawdown, sharpe_ratio, summarize
from nexow.engine.events import DoneEvent
from nexow.engine.simulation import Simulation


def _events():
    sim = Simulation("TEST", ScriptedStrategy([True, True, False, False]), 1000.0)
    events = []
    for c in [100.0, 90.0, 110.0, 105.0]:
        events.extend(sim.step(make_bar(c)))
    events.append(DoneEvent())
    return events


def test_max_drawdown_and_sharpe():
    assert max_drawdown([100, 120, 90, 130]) == pytest.approx(0.25)
    assert max_drawdown([]) == 0.0
    assert sharpe_ratio([]) == 0.0
    assert sharpe_ratio([0.01, 0.01, 0.01]) > 0


def test_close_returns_and_annualisation():
    assert close_returns([100.0]) == []
    assert close_returns([100.0, 110.0, 99.0]) == pytest.approx([0.1, -0.1])

    rets = [0.01, -0.01, 0.02, 0.0]
    daily = sharpe_ratio(rets, periods=1)
    assert sharpe_ratio(rets) == pytest.approx(daily * 252 ** 0.5)
    assert sharpe_ratio(rets, rf=0.005, periods=1) < daily


def test_max_drawdown_ignores_rallies_after_the_trough():
    assert max_drawdown([100.0, 80.0, 150.0, 140.0]) == pytest.approx(0.2)
    assert max_drawdown([5.0, 6.0, 7.0]) == 0.0


def test_events_frame_one_row_per_tick():
    df = events_frame(_events())

    assert len(df) == 4
    assert df["close"].tolist() == [100.0, 90.0, 110.0, 105.0]
    assert df["trades"].tolist() == [0, 0, 1, 1]


def test_summarize():
    s = summarize(_events())

    assert s["bars"] == 4
    assert (s["buys"], s["sells"]) == (1, 1)
    assert s["trades"] == 1
    assert s["pnl"] == pytest.approx(10.0)
    assert s["win_rate"] == 1.0
    assert s["worst_drawdown"] == pytest.approx(0.01)
    assert s["price_mdd"] == pytest.approx(0.1)


def test_summarize_empty_run():
    s = summarize([DoneEvent()])

    assert s["bars"] == 0
    assert s["pnl"] == 0.0
    assert s["price_sharpe"] == 0.0
