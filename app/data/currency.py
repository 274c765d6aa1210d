"""Currency utilities — static exchange rates for price conversion."""

# Static exchange rates to USD (can be updated periodically)
EXCHANGE_RATES_TO_USD: dict[str, float] = {
    "USD": 1.0,
    "CAD": 0.74,
    "GBP": 1.27,
    "EUR": 1.08,
    "COP": 0.00025,
    "MXN": 0.058,
    "BRL": 0.20,
    "JPY": 0.0067,
    "AUD": 0.65,
    "SGD": 0.75,
    "HKD": 0.13,
    "INR": 0.012,
    "AED": 0.27,
    "QAR": 0.27,
    "TRY": 0.031,
    "KRW": 0.00074,
    "TWD": 0.031,
}

CURRENCY_SYMBOLS: dict[str, str] = {
    "USD": "$", "CAD": "CA$", "GBP": "£", "EUR": "€",
    "COP": "COL$", "MXN": "MX$", "BRL": "R$",
    "JPY": "¥", "AUD": "A$", "SGD": "S$", "HKD": "HK$",
    "INR": "₹", "AED": "AED", "QAR": "QAR", "TRY": "TRY",
    "KRW": "₩", "TWD": "NT$",
}


def convert(amount: float, from_currency: str, to_currency: str) -> float:
    """Convert between two supported currencies via USD.

    Raises ValueError for currencies without a known rate.
    """
    src = from_currency.upper()
    dst = to_currency.upper()
    for code in (src, dst):
        if code not in EXCHANGE_RATES_TO_USD:
            raise ValueError(f"Unsupported currency: {code}")
    if src == dst:
        return round(amount, 2)
    usd = amount * EXCHANGE_RATES_TO_USD[src]
    return round(usd / EXCHANGE_RATES_TO_USD[dst], 2)


def format_price(amount: float, currency: str = "USD") -> str:
    """Format a price with currency symbol for display."""
    symbol = CURRENCY_SYMBOLS.get(currency, currency + " ")
    return f"{symbol}{round(amount):,}"
