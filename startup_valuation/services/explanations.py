import logging
import re

from ..core.metrics import record_model_call
from ..core.utils import format_money
from ..models.base import GenerativeModel, generate_recorded
from ..schemas import ValuationRange, ValuationSnapshot

logger = logging.getLogger(__name__)

BULLET_MARKERS = ("•", "-", "*")
_MARKER_RE = re.compile(r"^[•\-*]\s*")

def extract_bullets(text: str, limit: int = 3) -> list[str]:
    """
    Keep lines that start with a bullet marker, strip the marker, cap at `limit`.
    Fewer qualifying lines just means a shorter list.
    """
    bullets = []
    for line in text.splitlines():
        line = line.strip()
        if not line.startswith(BULLET_MARKERS):
            continue
        bullets.append(_MARKER_RE.sub("", line).strip())
        if len(bullets) == limit:
            break
    return bullets

def explanation_prompt(snapshot: ValuationSnapshot, valuation: ValuationRange) -> str:
    ms = snapshot.multiple_set
    cur = snapshot.currency
    return (
        "Write exactly 3 concise bullet points explaining this valuation:\n"
        f"- ARR: {format_money(snapshot.revenue, cur)}\n"
        f"- Sector: {snapshot.sector}\n"
        f"- Region: {snapshot.region}\n"
        f"- Stage: {snapshot.stage}\n"
        f"- Multiple: {ms.mid:.1f}× (range {ms.effective_low():.1f}×-{ms.effective_high():.1f}×)\n"
        f"- Valuation: {format_money(valuation.mid, cur)}\n\n"
        "Focus on: why this multiple makes sense, market context, one key risk. "
        "Keep each bullet under 25 words."
    )

def reply_prompt(utterance: str, snapshot: ValuationSnapshot, valuation: ValuationRange) -> str:
    cur = snapshot.currency
    return (
        f'User said: "{utterance}"\n\n'
        "Current valuation snapshot:\n"
        f"- ARR: {format_money(snapshot.revenue, cur)}\n"
        f"- Multiple: {snapshot.multiple_set.mid:.1f}×\n"
        f"- Valuation: {format_money(valuation.mid, cur)} (range {format_money(valuation.low, cur)} to {format_money(valuation.high, cur)})\n\n"
        "Write a helpful reply (≤120 words) explaining what changed and the new valuation. "
        f"Include {snapshot.currency} amounts. Be conversational and helpful."
    )

class ExplanationGenerator:
    """Narrates a computed valuation with the ungrounded model."""

    def __init__(self, model: GenerativeModel):
        self.model = model

    async def bullets(self, snapshot: ValuationSnapshot, valuation: ValuationRange) -> list[str]:
        response = await generate_recorded(self.model, explanation_prompt(snapshot, valuation), "explanation")
        record_model_call("explanation", "ok")
        return extract_bullets(response.text)

    async def reply(self, utterance: str, snapshot: ValuationSnapshot, valuation: ValuationRange) -> str:
        response = await generate_recorded(self.model, reply_prompt(utterance, snapshot, valuation), "chat_reply")
        record_model_call("chat_reply", "ok")
        return response.text.strip()
