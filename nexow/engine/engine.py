# nexow/engine/engine.py
from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field
from typing import Optional, Sequence

from loguru import logger

from nexow.data.split import train_test_split
from nexow.data.synthetic import generate_synthetic_bars
from nexow.domain.dto import Bar
from nexow.domain.errors import StrategyError
from nexow.domain.interfaces import Strategy
from nexow.domain.models import EngineConfig
from nexow.engine.channels import (
    ControlReceiver,
    ControlSender,
    EventReceiver,
    EventSender,
    control_channel,
    event_channel,
)
from nexow.engine.events import DoneEvent
from nexow.engine.simulation import Simulation
from nexow.strategies.factory import build_strategy


@dataclass
class EngineHandle:
    session_id: str
    events: EventReceiver
    control: ControlSender
    thread: threading.Thread = field(repr=False)

    def stop(self) -> None:
        self.control.stop()

    def is_running(self) -> bool:
        return self.thread.is_alive()

    def join(self, timeout: Optional[float] = None) -> bool:
        """True once the worker has exited."""
        self.thread.join(timeout)
        return not self.thread.is_alive()


class Engine:
    @staticmethod
    def spawn(
        config: EngineConfig,
        strategy: Optional[Strategy] = None,
        bars: Optional[Sequence[Bar]] = None,
        session_id: Optional[str] = None,
    ) -> EngineHandle:
        """
        Validates the config and starts one worker thread that owns the whole run.
        Returns right away, before any bar is processed. Raises ConfigError on a bad config.
        """
        config.validate()
        tx_evt, rx_evt = event_channel()
        tx_ctrl, rx_ctrl = control_channel()
        sid = session_id or uuid.uuid4().hex[:12]

        if strategy is None:
            strategy = build_strategy(config.strategy, config.rf_trees, config.rf_max_depth)

        worker = threading.Thread(
            target=_run,
            args=(sid, config, strategy, bars, tx_evt, rx_ctrl),
            name=f"nexow-engine-{sid}",
            daemon=True,
        )
        worker.start()
        return EngineHandle(session_id=sid, events=rx_evt, control=tx_ctrl, thread=worker)


def _run(
    sid: str,
    config: EngineConfig,
    strategy: Strategy,
    bars: Optional[Sequence[Bar]],
    tx: EventSender,
    ctrl: ControlReceiver,
) -> None:
    symbol = config.symbol
    sim: Optional[Simulation] = None
    stopped = False
    try:
        if bars is None:
            bars = generate_synthetic_bars(
                symbol, config.start_price, config.bar_interval_ms, config.bar_count, config.volatility
            )
        train, test = train_test_split(bars, config.train_split)
        logger.info(
            f"[{sid}] start {symbol} mode={config.mode.value} bars={len(bars)} "
            f"train={len(train)} test={len(test)} cash={config.starting_cash:.2f}"
        )

        try:
            strategy.train(train)
        except StrategyError as e:
            logger.warning(f"[{sid}] {e}; continuing on the heuristic fallback")

        sim = Simulation(
            symbol,
            strategy,
            config.starting_cash,
            report_sell_quantity=config.report_sell_quantity,
        )
        for bar in test:
            # single cancellation point: a stop lands between bars, never mid-tick
            if ctrl.stop_requested():
                stopped = True
                logger.info(f"[{sid}] stop requested after {sim.bars_processed} bars")
                break
            for evt in sim.step(bar):
                tx.send(evt)
    except Exception:
        logger.exception(f"[{sid}] simulation aborted")
    finally:
        tx.send(DoneEvent())
        tx.close()

    if sim is not None:
        logger.info(
            f"[{sid}] {'stopped' if stopped else 'completed'}: bars={sim.bars_processed} "
            f"trades={sim.trade_count} pnl={sim.pnl:.2f} equity={sim.equity:.2f}"
        )
