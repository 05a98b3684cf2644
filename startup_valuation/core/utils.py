import re

from .errors import InvalidAmount

_TAG_RE = re.compile(r"<[^>]*>")
_AMOUNT_RE = re.compile(r"^(\d+(?:\.\d*)?|\.\d+)\s*(k|l|lakhs?|cr|crores?)?$")

# Indian magnitude suffixes
_SUFFIX_MULTIPLIERS = {
    None: 1.0,
    "k": 1e3,
    "l": 1e5,
    "lakh": 1e5,
    "lakhs": 1e5,
    "cr": 1e7,
    "crore": 1e7,
    "crores": 1e7,
}

def sanitize_text(text: str, max_chars: int = 2500) -> str:
    """
    Strip HTML tags, trim, and cap the length of user-supplied chat text.
    """
    return _TAG_RE.sub("", text).strip()[:max_chars]

def parse_amount(value: str | int | float) -> float:
    """
    Parse a localized amount such as "1.5Cr", "12L", "85k" or "2,50,000"
    into base units. Plain numbers pass through unchanged.

    Every malformed input raises InvalidAmount with the same hint so callers
    can show one message.
    """
    if isinstance(value, bool):
        raise InvalidAmount()
    if isinstance(value, (int, float)):
        return float(value)
    if not isinstance(value, str):
        raise InvalidAmount()

    cleaned = value.strip().lower().replace(",", "")
    match = _AMOUNT_RE.match(cleaned)
    if not match:
        raise InvalidAmount()
    number, suffix = match.groups()
    return float(number) * _SUFFIX_MULTIPLIERS[suffix]

def format_money(amount: float, currency: str = "INR") -> str:
    """Human-friendly amount for prompts. INR uses Cr/L/k units; other tags are shown as-is."""
    if (currency or "").upper() != "INR":
        return f"{currency} {amount:,.0f}"
    if amount >= 1e7:
        return f"₹{amount / 1e7:.1f} Cr"
    if amount >= 1e5:
        return f"₹{amount / 1e5:.1f} L"
    if amount >= 1e3:
        return f"₹{amount / 1e3:.1f} k"
    return f"₹{amount:,.0f}"

def fnv1a_32(s: str) -> int:
    """Deterministic, fast hash for seed generation."""
    h = 0x811c9dc5
    for c in s.encode("utf-8"):
        h ^= c
        h = (h * 0x01000193) & 0xFFFFFFFF
    return h

def seeded_rand(seed: int, n: int = 1) -> list[float]:
    """
    Stateless pseudo-random generator (Mulberry32-like) so
    same seed → same outputs without storing PRNG state.
    """
    out = []
    t = (seed + 0x6D2B79F5) & 0xFFFFFFFF
    for _ in range(n):
        t = (t ^ (t >> 15)) * (t | 1) & 0xFFFFFFFF
        t ^= t + ((t ^ (t >> 7)) * (t | 61) & 0xFFFFFFFF)
        r = ((t ^ (t >> 14)) & 0xFFFFFFFF) / 4294967296.0
        out.append(r)
    return out
