import json
import time

import pytest

from arbwatch.market_data import (
    BinanceBookTicker,
    CoinBaseBookTicker,
    CoinBaseEvent,
    CoinBaseMessage,
    ExchangeName,
    MarketDataError,
    MarketQuote,
    Side,
    Token,
)

BINANCE_SAMPLE = {
    "u": 400900217,
    "s": "BNBUSDT",
    "b": "25.35190000",
    "B": "31.21000000",
    "a": "25.36520000",
    "A": "40.66000000",
}

COINBASE_TICKER = {
    "type": "ticker",
    "product_id": "ETH-USDT",
    "best_bid": "3000.5",
    "best_bid_quantity": "1.25",
    "best_ask": "3001.75",
    "best_ask_quantity": "0.5",
}


@pytest.mark.parametrize(
    "symbol, token",
    [
        ("BTCUSDT", Token.BTCUSDT),
        ("BTC-USDT", Token.BTCUSDT),
        ("ETHUSDT", Token.ETHUSDT),
        ("ETH-USDT", Token.ETHUSDT),
        ("TRB-USDT", Token.TRBUSDT),
        ("BNBUSDT", Token.BNBUSDT),
        ("ADA-USDT", Token.ADAUSDT),
        ("LINKUSDT", Token.LINKUSDT),
        ("DOGEUSDT", Token.UNKNOWN),
        ("btcusdt", Token.UNKNOWN),
        ("", Token.UNKNOWN),
    ],
)
def test_token_from_symbol(symbol, token):
    assert Token.from_symbol(symbol) is token


def test_enum_values_and_labels():
    assert ExchangeName(2) is ExchangeName.BINANCE
    assert ExchangeName(3) is ExchangeName.COINBASE
    assert str(ExchangeName(2)) == "Binance"
    assert str(ExchangeName(3)) == "CoinBase"
    assert str(Token.from_symbol("LINK-USDT")) == "LINKUSDT"
    assert [t.value for t in Token] == [5, 7, 11, 13, 15, 17, 19]


def test_binance_from_json():
    ticker = BinanceBookTicker.from_json(json.dumps(BINANCE_SAMPLE))
    assert ticker.symbol == "BNBUSDT"
    assert ticker.ask_price == 25.3652
    assert ticker.bid_price == 25.3519
    assert ticker.ask_quantity == 40.66
    assert ticker.bid_quantity == 31.21


def test_binance_quotes():
    ticker = BinanceBookTicker.from_dict(BINANCE_SAMPLE)
    before = int(time.time() * 1000)
    asks = ticker.ask_quotes()
    bids = ticker.bid_quotes()
    after = int(time.time() * 1000)
    assert len(asks) == 1 and len(bids) == 1
    ask, bid = asks[0], bids[0]
    assert (ask.exchange, ask.token, ask.side) == (ExchangeName.BINANCE, Token.BNBUSDT, Side.ASK)
    assert (ask.price, ask.quantity) == (ticker.ask_price, ticker.ask_quantity)
    assert (bid.side, bid.price, bid.quantity) == (Side.BID, ticker.bid_price, ticker.bid_quantity)
    assert before <= ask.timestamp_ms <= after
    assert before <= bid.timestamp_ms <= after


@pytest.mark.parametrize("key", ["s", "a", "b", "A", "B"])
def test_binance_missing_field(key):
    data = dict(BINANCE_SAMPLE)
    del data[key]
    with pytest.raises(MarketDataError):
        BinanceBookTicker.from_dict(data)


@pytest.mark.parametrize("bad", [25.3, "abc", "", " 1.0", "1_0"])
def test_binance_bad_price(bad):
    data = dict(BINANCE_SAMPLE, a=bad)
    with pytest.raises(MarketDataError):
        BinanceBookTicker.from_dict(data)


def test_binance_subscription_reply_rejected():
    with pytest.raises(MarketDataError):
        BinanceBookTicker.from_json('{"result":null,"id":1}')


def test_invalid_json():
    with pytest.raises(MarketDataError):
        BinanceBookTicker.from_json("{not json")
    with pytest.raises(MarketDataError):
        CoinBaseMessage.from_json("[1, 2")


def test_non_object_payload():
    with pytest.raises(MarketDataError):
        BinanceBookTicker.from_json("[1, 2, 3]")


def test_coinbase_ticker_quotes():
    ticker = CoinBaseBookTicker.from_dict(COINBASE_TICKER)
    ask = ticker.ask_quote()
    bid = ticker.bid_quote()
    assert isinstance(ask, MarketQuote)
    assert (ask.exchange, ask.token, ask.side) == (ExchangeName.COINBASE, Token.ETHUSDT, Side.ASK)
    assert (ask.price, ask.quantity) == (3001.75, 0.5)
    assert (bid.side, bid.price, bid.quantity) == (Side.BID, 3000.5, 1.25)


def test_coinbase_message_nested():
    payload = {
        "channel": "ticker",
        "events": [
            {"type": "update", "tickers": [COINBASE_TICKER, dict(COINBASE_TICKER, product_id="BTC-USDT")]},
            {"type": "update", "tickers": []},
        ],
    }
    message = CoinBaseMessage.from_json(json.dumps(payload))
    assert len(message.events) == 2
    assert [t.symbol for t in message.events[0].tickers] == ["ETH-USDT", "BTC-USDT"]
    assert message.events[1].tickers == []


def test_coinbase_missing_events():
    with pytest.raises(MarketDataError):
        CoinBaseMessage.from_json('{"type":"subscriptions"}')


def test_coinbase_event_requires_list():
    with pytest.raises(MarketDataError):
        CoinBaseEvent.from_dict({"tickers": "nope"})


def test_coinbase_ticker_bad_quantity():
    with pytest.raises(MarketDataError):
        CoinBaseBookTicker.from_dict(dict(COINBASE_TICKER, best_bid_quantity=None))