import argparse
import sys
from pathlib import Path

from loguru import logger

from nexow.backtest.report import summarize
from nexow.config import settings
from nexow.data.synthetic import bars_to_frame, generate_synthetic_bars
from nexow.domain.errors import EngineError
from nexow.domain.models import EngineConfig, Mode, StrategyKind
from nexow.engine.engine import Engine
from nexow.engine.events import BarEvent, to_json
from nexow.infra.logging import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="nexow", description="Synthetic long/flat trading simulator.")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = parser.add_subparsers(dest="cmd", required=True)

    sim = sub.add_parser("simulate", help="Run one engine session and stream its events")
    sim.add_argument("--symbol", default=settings.DEFAULT_SYMBOL)
    sim.add_argument("--bars", type=int, default=settings.LENGTH_BARS)
    sim.add_argument("--interval-ms", type=int, default=settings.BAR_INTERVAL_MS)
    sim.add_argument("--trees", type=int, default=settings.RF_TREES)
    sim.add_argument("--max-depth", type=int, default=settings.RF_MAX_DEPTH)
    sim.add_argument("--split", type=float, default=settings.TRAIN_SPLIT)
    sim.add_argument("--cash", type=float, default=settings.STARTING_CASH)
    sim.add_argument("--mode", default=Mode.SIMULATE.value, choices=[m.value for m in Mode])
    sim.add_argument("--strategy", default=StrategyKind.FOREST.value, choices=[k.value for k in StrategyKind])
    sim.add_argument("--stop-after", type=int, default=None, help="Send Stop after N bars")
    sim.add_argument("--json", action="store_true", help="Print every event as a JSON line")

    gen = sub.add_parser("bars", help="Write synthetic bars to CSV")
    gen.add_argument("--symbol", default=settings.DEFAULT_SYMBOL)
    gen.add_argument("--count", type=int, default=settings.LENGTH_BARS)
    gen.add_argument("--interval-ms", type=int, default=settings.BAR_INTERVAL_MS)
    gen.add_argument("--volatility", type=float, default=settings.VOLATILITY)
    gen.add_argument("--start-price", type=float, default=settings.START_PRICE)
    gen.add_argument("--out", type=Path, required=True)
    return parser


def _simulate(args) -> int:
    cfg = EngineConfig.from_settings(
        symbols=[args.symbol],
        bar_interval_ms=args.interval_ms,
        bar_count=args.bars,
        rf_trees=args.trees,
        rf_max_depth=args.max_depth,
        train_split=args.split,
        mode=Mode(args.mode),
        starting_cash=args.cash,
        strategy=StrategyKind(args.strategy),
    )
    handle = Engine.spawn(cfg)
    events = []
    seen_bars = 0
    for evt in handle.events:
        events.append(evt)
        if args.json:
            print(to_json(evt), flush=True)
        if isinstance(evt, BarEvent):
            seen_bars += 1
            if args.stop_after is not None and seen_bars == args.stop_after:
                handle.stop()
    handle.join()

    if not args.json:
        s = summarize(events)
        print(f"\n=== {cfg.symbol} ({cfg.mode.value}, {cfg.strategy.value}) ===")
        print(f"Bars         : {s['bars']}")
        print(f"Orders       : {s['buys']} buy / {s['sells']} sell")
        print(f"Trades       : {s['trades']}")
        print(f"Win rate     : {s['win_rate'] * 100:.2f} %")
        print(f"PnL          : {s['pnl']:.2f}")
        print(f"Worst DD     : {s['worst_drawdown'] * 100:.2f} %")
        print(f"Price MDD    : {s['price_mdd'] * 100:.2f} %")
        print()
    return 0


def _bars(args) -> int:
    bars = generate_synthetic_bars(args.symbol, args.start_price, args.interval_ms, args.count, args.volatility)
    out = args.out
    out.parent.mkdir(parents=True, exist_ok=True)
    bars_to_frame(bars).to_csv(out, index=False)
    logger.info(f"Wrote {len(bars)} bars to {out}")
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)
    try:
        if args.cmd == "simulate":
            return _simulate(args)
        if args.cmd == "bars":
            return _bars(args)
        return 2
    except EngineError as e:
        logger.error(f"Error: {e}")
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
