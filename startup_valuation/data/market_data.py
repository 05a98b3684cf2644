"""
Market-multiple lookup through the search-grounded model.

The model is asked for a bare JSON object. Its text is parsed strictly; one
retry with a sterner prompt is allowed, after which the lookup fails with
MarketDataUnavailable. Callers never see raw model text.
"""
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from pydantic import BaseModel, PositiveFloat, ValidationError

from ..core.errors import MarketDataUnavailable
from ..core.metrics import record_model_call
from ..models.base import GenerativeModel, GroundingChunk, generate_recorded
from ..schemas import Citation, MultipleSet

logger = logging.getLogger(__name__)

RETRY_SUFFIX = "\n\nIMPORTANT: Return ONLY the JSON object, no other text."

class MultiplesPayload(BaseModel):
    """Shape the model is asked to return."""
    multipleMid: PositiveFloat
    multipleLow: Optional[PositiveFloat] = None
    multipleHigh: Optional[PositiveFloat] = None
    asOf: Optional[str] = None
    shortRationale: Optional[str] = None

    def to_multiple_set(self) -> MultipleSet:
        return MultipleSet(
            mid=self.multipleMid,
            low=self.multipleLow,
            high=self.multipleHigh,
            as_of=self.asOf or date.today().strftime("%Y-%m"),
            rationale=self.shortRationale,
        )

@dataclass
class MarketData:
    multiple_set: MultipleSet
    citations: List[Citation] = field(default_factory=list)

def multiples_prompt(sector: str, region: str, stage: str, year: Optional[int] = None) -> str:
    year = year or date.today().year
    return (
        f"Find current ARR revenue multiples for {sector} companies in {region} "
        f"at {stage} stage in {year}. Return ONLY valid JSON:\n"
        "{\n"
        '  "multipleMid": number,\n'
        '  "multipleLow": number,\n'
        '  "multipleHigh": number,\n'
        '  "asOf": "YYYY-MM",\n'
        '  "shortRationale": "brief reason for this range"\n'
        "}"
    )

def parse_multiples(text: str) -> MultiplesPayload:
    """Strict parse: the whole text must be one JSON object with a positive multipleMid."""
    return MultiplesPayload.model_validate_json(text)

def build_citations(chunks: Optional[List[GroundingChunk]]) -> List[Citation]:
    """Number grounding sources 1..n in the order the model returned them."""
    if not chunks:
        return []
    return [
        Citation(index=i, title=chunk.title or "Source", uri=chunk.uri or "#")
        for i, chunk in enumerate(chunks, start=1)
    ]

class MarketDataRetriever:
    def __init__(self, model: GenerativeModel):
        self.model = model

    async def fetch_multiples(self, sector: str, region: str, stage: str) -> MarketData:
        prompt = multiples_prompt(sector, region, stage)
        attempts = (
            ("market_data", prompt),
            ("market_data_retry", prompt + RETRY_SUFFIX),
        )
        for purpose, text in attempts:
            response = await generate_recorded(self.model, text, purpose, grounded=True)
            try:
                payload = parse_multiples(response.text)
            except ValidationError as exc:
                record_model_call(purpose, "unparseable")
                logger.warning(
                    "market data response not usable (%s, %d error(s)): %.200r",
                    purpose, exc.error_count(), response.text,
                )
                continue
            record_model_call(purpose, "ok")
            return MarketData(
                multiple_set=payload.to_multiple_set(),
                citations=build_citations(response.grounding_chunks),
            )
        raise MarketDataUnavailable(
            f"no parseable multiples for sector={sector!r} region={region!r} stage={stage!r}"
        )
