# nexow/engine/events.py
from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from typing import Any, ClassVar, Dict, Union

from nexow.domain.dto import Bar, Metrics, Order, OrderType, Side, Trade


@dataclass(frozen=True)
class BarEvent:
    type: ClassVar[str] = "Bar"
    bar: Bar

    def to_wire(self) -> Dict[str, Any]:
        return {"type": self.type, **asdict(self.bar)}


@dataclass(frozen=True)
class OrderEvent:
    type: ClassVar[str] = "Order"
    order: Order

    def to_wire(self) -> Dict[str, Any]:
        o = self.order
        return {
            "type": self.type,
            "id": o.id,
            "symbol": o.symbol,
            "side": o.side.value,
            "qty": o.qty,
            "order_type": o.type.value,
        }


@dataclass(frozen=True)
class TradeEvent:
    type: ClassVar[str] = "Trade"
    trade: Trade

    def to_wire(self) -> Dict[str, Any]:
        return {"type": self.type, **asdict(self.trade)}


@dataclass(frozen=True)
class MetricsEvent:
    type: ClassVar[str] = "Metrics"
    metrics: Metrics

    def to_wire(self) -> Dict[str, Any]:
        return {"type": self.type, **asdict(self.metrics)}


@dataclass(frozen=True)
class DoneEvent:
    type: ClassVar[str] = "Done"

    def to_wire(self) -> Dict[str, Any]:
        return {"type": self.type}


EngineEvent = Union[BarEvent, OrderEvent, TradeEvent, MetricsEvent, DoneEvent]


def to_json(event: EngineEvent) -> str:
    return json.dumps(event.to_wire())


def from_wire(data: Dict[str, Any]) -> EngineEvent:
    """Inverse of to_wire(); raises ValueError on an unknown tag."""
    payload = dict(data)
    tag = payload.pop("type", None)
    if tag == "Bar":
        return BarEvent(Bar(**payload))
    if tag == "Order":
        return OrderEvent(
            Order(
                id=int(payload["id"]),
                symbol=payload["symbol"],
                side=Side(payload["side"]),
                qty=float(payload["qty"]),
                type=OrderType(payload.get("order_type", OrderType.MARKET.value)),
            )
        )
    if tag == "Trade":
        return TradeEvent(Trade(**payload))
    if tag == "Metrics":
        return MetricsEvent(Metrics(**payload))
    if tag == "Done":
        return DoneEvent()
    raise ValueError(f"Unknown event type: {tag!r}")
