"""Currency display helpers."""

CURRENCY_SYMBOLS = {
    "USD": "$",
    "INR": "₹",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
}

PRIVACY_MASK = "••••"


def format_currency(amount: float, currency: str, privacy_mode: bool = False) -> str:
    """Render ``amount`` with its currency symbol, grouping and at most two decimals."""
    if privacy_mode:
        return PRIVACY_MASK

    symbol = CURRENCY_SYMBOLS.get(currency, currency)
    text = f"{abs(amount):,.2f}".rstrip("0").rstrip(".")
    sign = "-" if amount < 0 and text != "0" else ""
    return f"{sign}{symbol}{text}"
