"""Stream best bid/ask prices from exchanges and watch for price gaps."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from collections.abc import Awaitable, Callable, Iterable
from typing import Any, Optional

import websockets
from websockets.exceptions import ConnectionClosedError, ConnectionClosedOK, WebSocketException

from .market_data import (
    BinanceBookTicker,
    CoinBaseMessage,
    MarketDataError,
    MarketQuote,
    Side,
)
from .price_matrix import PriceMatrix

BINANCE_URL = "wss://stream.binance.com:9443/ws/stream"
COINBASE_URL = "wss://advanced-trade-ws.coinbase.com"
PRINT_INTERVAL = 20.0

_TRADE_MARKER = '"e":"trade"'

Handler = Callable[[str, PriceMatrix, PriceMatrix], list[MarketQuote]]


def binance_subscribe_message() -> dict[str, Any]:
    """The subscription request sent to the Binance stream."""
    return {
        "method": "SUBSCRIBE",
        "params": [
            "btcusdt@bookTicker",
            "ethusdt@bookTicker",
            "adausdt@bookTicker",
            "linkusdt@bookTicker",
        ],
        "id": 1,
    }


def coinbase_subscribe_message() -> dict[str, Any]:
    """The subscription request sent to the Coinbase stream."""
    return {
        "type": "subscribe",
        "product_ids": ["BTC-USDT", "ETH-USDT", "ADA-USDT", "LINK-USDT"],
        "channel": "ticker",
    }


def _apply(quotes: Iterable[MarketQuote], bids: PriceMatrix, asks: PriceMatrix) -> None:
    for quote in quotes:
        target = asks if quote.side is Side.ASK else bids
        target.update(quote.exchange, quote.token, quote.price)


def handle_binance_message(
    text: str, bids: PriceMatrix, asks: PriceMatrix
) -> list[MarketQuote]:
    """Apply one Binance text frame to the matrices and return the quotes applied.

    Trade frames are ignored. Raises MarketDataError if the frame is not a book ticker.
    """
    if _TRADE_MARKER in text:
        return []
    ticker = BinanceBookTicker.from_json(text)
    quotes = [*ticker.ask_quotes(), *ticker.bid_quotes()]
    _apply(quotes, bids, asks)
    return quotes


def handle_coinbase_message(
    text: str, bids: PriceMatrix, asks: PriceMatrix
) -> list[MarketQuote]:
    """Apply one Coinbase text frame to the matrices and return the quotes applied.

    Trade frames are ignored. Raises MarketDataError if the frame cannot be decoded.
    """
    if _TRADE_MARKER in text:
        return []
    message = CoinBaseMessage.from_json(text)
    quotes: list[MarketQuote] = []
    for event in message.events:
        for ticker in event.tickers:
            pair = [ticker.ask_quote(), ticker.bid_quote()]
            _apply(pair, bids, asks)
            quotes.extend(pair)
    return quotes


async def _run_feed(
    url: str,
    name: str,
    subscribe: dict[str, Any],
    handle: Handler,
    parse_error: str,
    bids: PriceMatrix,
    asks: PriceMatrix,
) -> None:
    try:
        connection = await websockets.connect(url)
    except (OSError, asyncio.TimeoutError, WebSocketException) as exc:
        print(repr(exc), file=sys.stderr)
        return

    async with connection:
        print(f"connected to {name}")
        try:
            await connection.send(json.dumps(subscribe))
            async for message in connection:
                if not isinstance(message, str):
                    continue
                try:
                    handle(message, bids, asks)
                except MarketDataError as exc:
                    print(f"{parse_error} {exc}", file=sys.stderr)
        except ConnectionClosedOK:
            pass
        except ConnectionClosedError as exc:
            print(repr(exc), file=sys.stderr)
            return
    print("closing")


async def run_binance(url: str, bids: PriceMatrix, asks: PriceMatrix) -> None:
    """Follow the Binance book-ticker stream until it closes."""
    await _run_feed(
        url,
        "binance",
        binance_subscribe_message(),
        handle_binance_message,
        "failed to parse json",
        bids,
        asks,
    )


async def run_coinbase(url: str, bids: PriceMatrix, asks: PriceMatrix) -> None:
    """Follow the Coinbase ticker channel until it closes."""
    await _run_feed(
        url,
        "coinbase!",
        coinbase_subscribe_message(),
        handle_coinbase_message,
        "failed to parse json from coinbase",
        bids,
        asks,
    )


async def print_loop(
    bids: PriceMatrix, asks: PriceMatrix, interval: float = PRINT_INTERVAL
) -> None:
    """Print both matrices now and then every ``interval`` seconds, forever."""
    while True:
        bids.print_matrix("BID")
        asks.print_matrix("ASK")
        await asyncio.sleep(interval)


async def arb_loop(matrix: PriceMatrix) -> None:
    """Scan the matrix for price gaps continuously, yielding between scans."""
    while True:
        matrix.report_arb_ops()
        await asyncio.sleep(0)


async def run() -> None:
    """Start both feeds, the printer and the gap scanner."""
    bids = PriceMatrix()
    asks = PriceMatrix()
    tasks: list[asyncio.Task[None]] = [
        asyncio.create_task(run_binance(BINANCE_URL, bids, asks)),
        asyncio.create_task(run_coinbase(COINBASE_URL, bids, asks)),
        asyncio.create_task(print_loop(bids, asks)),
    ]
    scanner = asyncio.create_task(arb_loop(bids))
    try:
        for task in tasks:
            try:
                await task
            except Exception as exc:  # a failed task must not stop the others
                print(f"Task failed: {exc!r}", file=sys.stderr)
    finally:
        scanner.cancel()
        for task in tasks:
            task.cancel()


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="arbwatch",
        description="Stream exchange prices and report price gaps between exchanges.",
    )
    parser.parse_args(argv)
    awaitable: Awaitable[None] = run()
    try:
        asyncio.run(awaitable)  # type: ignore[arg-type]
    except KeyboardInterrupt:
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())