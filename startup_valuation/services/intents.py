"""
Rule-based chat intents.

Parsing and applying are separate steps. `parse_intents` turns an utterance
into an ordered list of `Intent` values; each matcher is independent, so any
number of intents can fire in one turn. `apply_intents` folds them over the
snapshot in that fixed order, each step returning a new snapshot.
"""
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from ..core.utils import parse_amount
from ..schemas import ValuationSnapshot

class IntentKind(str, Enum):
    SET_REVENUE = "set_revenue"
    SET_MULTIPLE = "set_multiple"
    USE_LOW_MULTIPLE = "use_low_multiple"
    USE_HIGH_MULTIPLE = "use_high_multiple"
    PERCENT_DELTA = "percent_delta"
    FRESH_MARKET_DATA = "fresh_market_data"

@dataclass(frozen=True)
class Intent:
    kind: IntentKind
    value: Optional[float] = None
    target: Optional[str] = None  # "revenue" | "multiple", percent deltas only

@dataclass(frozen=True)
class IntentOutcome:
    snapshot: ValuationSnapshot
    intents: tuple[Intent, ...] = ()

    @property
    def needs_fresh_market_data(self) -> bool:
        return any(i.kind is IntentKind.FRESH_MARKET_DATA for i in self.intents)

# ----- Matchers (utterance -> Intent | None), in application order -----

_SET_REVENUE_RE = re.compile(
    r"\b(?:(?:make|set)\s+)?(arr|mrr)(?:\s+to)?\s+"
    r"([0-9.][0-9.,]*(?:\s*(?:crores?|cr|lakhs?|l|k))?)"
    # Stop only where the amount really ends, and never in front of "%".
    r"(?!\w|[.,]\w|\s*%)",
    re.IGNORECASE,
)
_SET_MULTIPLE_RE = re.compile(
    r"\b(?:use|set\s+multiple\s+to)\s+(\d+(?:\.\d+)?|\.\d+)\s*[×x]", re.IGNORECASE
)
_USE_LOW_RE = re.compile(r"\buse\s+low\s+multiple", re.IGNORECASE)
_USE_HIGH_RE = re.compile(r"\buse\s+high\s+multiple", re.IGNORECASE)
_PERCENT_RE = re.compile(r"([+-]?\d+(?:\.\d+)?)\s*%\s+(arr|revenue|multiple)\b", re.IGNORECASE)
_FRESH_RE = re.compile(
    r"latest.*multiples|market\s+multiple\s+now|fresh\s+multiples", re.IGNORECASE
)

def _match_set_revenue(text: str) -> Optional[Intent]:
    m = _SET_REVENUE_RE.search(text)
    if not m:
        return None
    # InvalidAmount propagates: a bad amount aborts the whole turn.
    amount = parse_amount(m.group(2))
    if m.group(1).lower() == "mrr":
        amount *= 12
    return Intent(IntentKind.SET_REVENUE, value=amount)

def _match_set_multiple(text: str) -> Optional[Intent]:
    m = _SET_MULTIPLE_RE.search(text)
    if not m:
        return None
    value = float(m.group(1))
    if value <= 0:
        return None
    return Intent(IntentKind.SET_MULTIPLE, value=value)

def _match_use_low(text: str) -> Optional[Intent]:
    return Intent(IntentKind.USE_LOW_MULTIPLE) if _USE_LOW_RE.search(text) else None

def _match_use_high(text: str) -> Optional[Intent]:
    return Intent(IntentKind.USE_HIGH_MULTIPLE) if _USE_HIGH_RE.search(text) else None

def _match_percent(text: str) -> Optional[Intent]:
    m = _PERCENT_RE.search(text)
    if not m:
        return None
    target = "multiple" if m.group(2).lower() == "multiple" else "revenue"
    return Intent(IntentKind.PERCENT_DELTA, value=float(m.group(1)), target=target)

def _match_fresh(text: str) -> Optional[Intent]:
    return Intent(IntentKind.FRESH_MARKET_DATA) if _FRESH_RE.search(text) else None

MATCHERS: tuple[Callable[[str], Optional[Intent]], ...] = (
    _match_set_revenue,
    _match_set_multiple,
    _match_use_low,
    _match_use_high,
    _match_percent,
    _match_fresh,
)

def parse_intents(text: str) -> list[Intent]:
    """All intents found in `text`, in application order. Raises InvalidAmount."""
    return [intent for intent in (match(text) for match in MATCHERS) if intent is not None]

# ----- Mutators (snapshot, intent) -> new snapshot -----

def _set_revenue(snapshot: ValuationSnapshot, intent: Intent) -> ValuationSnapshot:
    return snapshot.model_copy(update={"revenue": intent.value})

def _set_multiple(snapshot: ValuationSnapshot, intent: Intent) -> ValuationSnapshot:
    mid = intent.value
    # User-chosen multiple replaces any model-sourced band
    multiples = snapshot.multiple_set.model_copy(update={"mid": mid, "low": mid * 0.8, "high": mid * 1.2})
    return snapshot.model_copy(update={"multiple_set": multiples})

def _use_low(snapshot: ValuationSnapshot, intent: Intent) -> ValuationSnapshot:
    ms = snapshot.multiple_set
    return snapshot.model_copy(update={"multiple_set": ms.model_copy(update={"mid": ms.effective_low()})})

def _use_high(snapshot: ValuationSnapshot, intent: Intent) -> ValuationSnapshot:
    ms = snapshot.multiple_set
    return snapshot.model_copy(update={"multiple_set": ms.model_copy(update={"mid": ms.effective_high()})})

def _percent_delta(snapshot: ValuationSnapshot, intent: Intent) -> ValuationSnapshot:
    factor = 1 + intent.value / 100
    if intent.target == "revenue":
        return snapshot.model_copy(update={"revenue": snapshot.revenue * factor})
    ms = snapshot.multiple_set
    multiples = ms.model_copy(update={
        "mid": ms.mid * factor,
        "low": ms.effective_low() * factor,
        "high": ms.effective_high() * factor,
    })
    return snapshot.model_copy(update={"multiple_set": multiples})

def _no_change(snapshot: ValuationSnapshot, intent: Intent) -> ValuationSnapshot:
    # Fresh data is fetched by the orchestrator, not here.
    return snapshot

MUTATORS: dict[IntentKind, Callable[[ValuationSnapshot, Intent], ValuationSnapshot]] = {
    IntentKind.SET_REVENUE: _set_revenue,
    IntentKind.SET_MULTIPLE: _set_multiple,
    IntentKind.USE_LOW_MULTIPLE: _use_low,
    IntentKind.USE_HIGH_MULTIPLE: _use_high,
    IntentKind.PERCENT_DELTA: _percent_delta,
    IntentKind.FRESH_MARKET_DATA: _no_change,
}

def apply_intent(snapshot: ValuationSnapshot, intent: Intent) -> ValuationSnapshot:
    return MUTATORS[intent.kind](snapshot, intent)

def apply_intents(snapshot: ValuationSnapshot, utterance: str) -> IntentOutcome:
    """
    Parse `utterance` and fold every matching intent over `snapshot`.
    The input snapshot is never modified; with no match the same value comes back.
    """
    intents = tuple(parse_intents(utterance))
    updated = snapshot
    for intent in intents:
        updated = apply_intent(updated, intent)
    return IntentOutcome(snapshot=updated, intents=intents)
