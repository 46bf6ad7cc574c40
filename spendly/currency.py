from spendly.config import settings

CURRENCY_SYMBOLS: dict[str, str] = {
    "NGN": "₦",
    "EUR": "€",
    "USD": "$",
    "GBP": "£",
    "JPY": "¥",
    "INR": "₹",
    "KRW": "₩",
    "TRY": "₺",
    "ILS": "₪",
    "PHP": "₱",
    "GHS": "₵",
    "KES": "KSh",
    "ZAR": "R",
    "CHF": "CHF",
    "SEK": "kr",
}

PREFIX_SYMBOLS = frozenset({"₦", "€", "$", "£", "¥", "₹", "₩", "₺", "₪", "₱", "₵"})


def currency_symbol(code: str | None = None) -> str:
    code = code or settings.currency
    return CURRENCY_SYMBOLS.get(code, code)


def format_amount(amount: float, currency_code: str | None = None) -> str:
    sym = currency_symbol(currency_code)
    if sym in PREFIX_SYMBOLS:
        if amount < 0:
            return f"-{sym}{abs(amount):.2f}"
        return f"{sym}{amount:.2f}"
    return f"{amount:.2f} {sym}"
