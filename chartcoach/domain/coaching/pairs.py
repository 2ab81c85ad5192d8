"""
Pair symbol rules shared by the server watchlist and the client store.
"""

from typing import Any, Iterable

DEFAULT_PAIRS: tuple[str, ...] = ("EURUSD", "GBPUSD", "XAUUSD", "NAS100", "US30")


def normalize_pairs(symbols: Iterable[Any]) -> list[str]:
    """Trim and upper-case symbols, dropping blanks and later duplicates.

    First-occurrence order is preserved.
    """
    cleaned: list[str] = []
    seen: set[str] = set()
    for raw in symbols:
        symbol = str(raw if raw is not None else "").strip().upper()
        if symbol and symbol not in seen:
            seen.add(symbol)
            cleaned.append(symbol)
    return cleaned


def parse_pairs_text(raw: str) -> list[str]:
    """Parse a one-symbol-per-line text box into a clean symbol list."""
    return normalize_pairs(raw.split("\n"))
