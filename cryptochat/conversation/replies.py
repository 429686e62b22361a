"""Reply text templates. Replies are also read aloud, so they stay plain text."""

from __future__ import annotations

from cryptochat.core.models import CoinRef, Holding, PricePoint, Timeframe, TrendingCoin

GREETING = (
    "Hello! I'm your crypto assistant. Ask me about prices, trends, or manage your portfolio. "
    "You can type or use voice commands!"
)
GENERIC_ERROR = "Sorry, I encountered an error while fetching data. Please try again in a moment."
TRENDING_UNAVAILABLE = "Sorry, I couldn't fetch the trending cryptocurrencies right now. Please try again in a moment."
EMPTY_PORTFOLIO = 'Your portfolio is empty. Try saying "I have 1 BTC" or "I have 2 ETH" to add holdings!'
EXAMPLES = '"What\'s Bitcoin\'s price?", "Show trending cryptos", "I have 1 BTC", or "Show Bitcoin chart"'


def format_usd(value: float) -> str:
    if value == 0:
        return "0"
    if abs(value) >= 1:
        return f"{value:,.2f}"
    # sub-dollar coins (e.g. SHIB) need more than two decimals to be readable
    return f"{value:.8f}".rstrip("0").rstrip(".")


def format_change(change: float) -> str:
    sign = "+" if change > 0 else ""
    return f"{sign}{change:.2f}%"


def format_amount(amount: float) -> str:
    return f"{amount:g}"


def price(coin: CoinRef, point: PricePoint) -> str:
    text = f"{coin.label} is trading at ${format_usd(point.price)}"
    if point.change_24h_pct is None:
        return text
    return f"{text} with a 24h change of {format_change(point.change_24h_pct)}"


def price_unavailable(coin: CoinRef) -> str:
    return f"Sorry, I couldn't fetch the price of {coin.display_name} right now. Please try again in a moment."


def trending(coins: list[TrendingCoin]) -> str:
    lines = "\n".join(f"{c.coin.display_name} ({c.coin.symbol}): ${format_usd(c.price.price)}" for c in coins)
    return f"Here are the top trending cryptocurrencies:\n\n{lines}"


def chart(coin: CoinRef, timeframe: Timeframe) -> str:
    return f"Here's the {coin.display_name} price chart for the last {timeframe.label}!"


def chart_unavailable(coin: CoinRef) -> str:
    return f"Sorry, I couldn't load the {coin.display_name} price chart right now. Please try again in a moment."


def portfolio(total: float, holdings: list[Holding]) -> str:
    lines = "\n".join(
        f"{h.coin.label}: {format_amount(h.amount)} worth ${format_usd(h.value)}" for h in holdings
    )
    return f"Your portfolio is worth ${format_usd(total)}!\n\n{lines}"


def added(coin: CoinRef, amount: float, total: float) -> str:
    return (
        f"Added {format_amount(amount)} {coin.symbol} to your portfolio! "
        f"Your total portfolio value is now ${format_usd(total)}."
    )


def add_failed(coin: CoinRef) -> str:
    return (
        f"Sorry, I couldn't get a current price for {coin.display_name}, so I didn't add it to your "
        "portfolio. Please try again in a moment."
    )


def _supported_list(coins: list[CoinRef]) -> str:
    return ", ".join(c.label for c in coins)


def which_coin(supported: list[CoinRef]) -> str:
    return f"Which coin do you mean? I can look up: {_supported_list(supported)}."


def not_understood(supported: list[CoinRef]) -> str:
    return (
        "I can help you with crypto prices, trending coins, portfolio tracking, and price charts "
        f"for {_supported_list(supported)}. Try asking: {EXAMPLES}."
    )


def need_amount(coin: CoinRef | None) -> str:
    symbol = coin.symbol if coin is not None else "BTC"
    what = f" of {coin.display_name}" if coin is not None else ""
    return f'I didn\'t catch a valid amount{what}. Try saying "I have 1.5 {symbol}" or "I have 2 ETH".'
