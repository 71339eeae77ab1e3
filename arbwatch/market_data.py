"""Exchange and token identifiers, normalised quotes and exchange feed payloads."""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping


class MarketDataError(ValueError):
    """Raised when a feed payload cannot be decoded."""


class ExchangeName(Enum):
    """Supported exchanges; each value is a distinct prime."""

    BINANCE = 2
    COINBASE = 3

    def __str__(self) -> str:
        return _EXCHANGE_LABELS[self]


_EXCHANGE_LABELS = {
    ExchangeName.BINANCE: "Binance",
    ExchangeName.COINBASE: "CoinBase",
}


class Token(Enum):
    """Tracked trading pairs; each value is a distinct odd number."""

    BTCUSDT = 5
    UNKNOWN = 7
    ETHUSDT = 11
    BNBUSDT = 13
    TRBUSDT = 15
    LINKUSDT = 17
    ADAUSDT = 19

    def __str__(self) -> str:
        return self.name

    @classmethod
    def from_symbol(cls, symbol: str) -> Token:
        """Map an exchange symbol such as ``BTCUSDT`` or ``BTC-USDT`` to a token."""
        return _SYMBOLS.get(symbol, cls.UNKNOWN)


_SYMBOLS = {
    "BTCUSDT": Token.BTCUSDT,
    "BTC-USDT": Token.BTCUSDT,
    "ETHUSDT": Token.ETHUSDT,
    "ETH-USDT": Token.ETHUSDT,
    "TRBUSDT": Token.TRBUSDT,
    "TRB-USDT": Token.TRBUSDT,
    "BNBUSDT": Token.BNBUSDT,
    "BNB-USDT": Token.BNBUSDT,
    "ADAUSDT": Token.ADAUSDT,
    "ADA-USDT": Token.ADAUSDT,
    "LINKUSDT": Token.LINKUSDT,
    "LINK-USDT": Token.LINKUSDT,
}


class Side(Enum):
    """Which side of the book a quote belongs to."""

    ASK = "ask"
    BID = "bid"


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class MarketQuote:
    """A best price on one side of one exchange's book."""

    exchange: ExchangeName
    token: Token
    side: Side
    price: float
    quantity: float
    timestamp_ms: int = field(default_factory=_now_ms)


def _require(data: Mapping[str, Any], key: str) -> Any:
    if not isinstance(data, Mapping):
        raise MarketDataError(f"expected an object, got {type(data).__name__}")
    try:
        return data[key]
    except KeyError:
        raise MarketDataError(f"missing field {key!r}") from None


def _string_field(data: Mapping[str, Any], key: str) -> str:
    value = _require(data, key)
    if not isinstance(value, str):
        raise MarketDataError(f"field {key!r} must be a string")
    return value


def _float_field(data: Mapping[str, Any], key: str) -> float:
    text = _string_field(data, key)
    if not text or text != text.strip() or "_" in text:
        raise MarketDataError(f"field {key!r} is not a number: {text!r}")
    try:
        return float(text)
    except ValueError:
        raise MarketDataError(f"field {key!r} is not a number: {text!r}") from None


def _load_json(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise MarketDataError(f"invalid JSON: {exc}") from exc


@dataclass(frozen=True)
class BinanceBookTicker:
    """A Binance ``bookTicker`` update."""

    symbol: str
    ask_price: float
    bid_price: float
    ask_quantity: float
    bid_quantity: float

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> BinanceBookTicker:
        return cls(
            symbol=_string_field(data, "s"),
            ask_price=_float_field(data, "a"),
            bid_price=_float_field(data, "b"),
            ask_quantity=_float_field(data, "A"),
            bid_quantity=_float_field(data, "B"),
        )

    @classmethod
    def from_json(cls, text: str) -> BinanceBookTicker:
        return cls.from_dict(_load_json(text))

    def _quote(self, side: Side, price: float, quantity: float) -> MarketQuote:
        return MarketQuote(
            exchange=ExchangeName.BINANCE,
            token=Token.from_symbol(self.symbol),
            side=side,
            price=price,
            quantity=quantity,
        )

    def ask_quotes(self) -> list[MarketQuote]:
        return [self._quote(Side.ASK, self.ask_price, self.ask_quantity)]

    def bid_quotes(self) -> list[MarketQuote]:
        return [self._quote(Side.BID, self.bid_price, self.bid_quantity)]


@dataclass(frozen=True)
class CoinBaseBookTicker:
    """One ticker entry inside a Coinbase ``ticker`` event."""

    symbol: str
    ask_price: float
    bid_price: float
    ask_quantity: float
    bid_quantity: float

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CoinBaseBookTicker:
        return cls(
            symbol=_string_field(data, "product_id"),
            ask_price=_float_field(data, "best_ask"),
            bid_price=_float_field(data, "best_bid"),
            ask_quantity=_float_field(data, "best_ask_quantity"),
            bid_quantity=_float_field(data, "best_bid_quantity"),
        )

    def _quote(self, side: Side, price: float, quantity: float) -> MarketQuote:
        return MarketQuote(
            exchange=ExchangeName.COINBASE,
            token=Token.from_symbol(self.symbol),
            side=side,
            price=price,
            quantity=quantity,
        )

    def ask_quote(self) -> MarketQuote:
        return self._quote(Side.ASK, self.ask_price, self.ask_quantity)

    def bid_quote(self) -> MarketQuote:
        return self._quote(Side.BID, self.bid_price, self.bid_quantity)


def _list_field(data: Mapping[str, Any], key: str) -> list:
    value = _require(data, key)
    if not isinstance(value, list):
        raise MarketDataError(f"field {key!r} must be a list")
    return value


@dataclass(frozen=True)
class CoinBaseEvent:
    """A Coinbase event carrying ticker entries."""

    tickers: list[CoinBaseBookTicker]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CoinBaseEvent:
        return cls([CoinBaseBookTicker.from_dict(t) for t in _list_field(data, "tickers")])


@dataclass(frozen=True)
class CoinBaseMessage:
    """A Coinbase channel message holding a list of events."""

    events: list[CoinBaseEvent]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CoinBaseMessage:
        return cls([CoinBaseEvent.from_dict(e) for e in _list_field(data, "events")])

    @classmethod
    def from_json(cls, text: str) -> CoinBaseMessage:
        return cls.from_dict(_load_json(text))