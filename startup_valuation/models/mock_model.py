import json
from datetime import date

from .base import GenerativeModel, GroundingChunk, ModelResponse
from ..core.utils import fnv1a_32, seeded_rand

class MockModel(GenerativeModel):
    """
    Deterministic offline stand-in for the external model. Uses the prompt as
    a seed so the same question always gets the same answer.
    Grounded prompts get a multiples JSON object with fake sources; anything
    else gets three bullet lines.
    """
    async def generate(self, prompt: str, *, grounded: bool = False) -> ModelResponse:
        seed = fnv1a_32(prompt)
        if grounded:
            return self._multiples(seed)
        return ModelResponse(text="\n".join([
            "• The multiple sits within the usual range for companies at this stage.",
            "• Recent deal activity in the sector supports the mid-point estimate.",
            "• Key risk: revenue concentration could compress the multiple at the next round.",
        ]))

    def _multiples(self, seed: int) -> ModelResponse:
        # Mid multiple between 3× and 12×, band roughly ±20%
        mid = round(3.0 + seeded_rand(seed, 1)[0] * 9.0, 1)
        spread = 0.15 + seeded_rand(seed + 1, 1)[0] * 0.1
        payload = {
            "multipleMid": mid,
            "multipleLow": round(mid * (1 - spread), 1),
            "multipleHigh": round(mid * (1 + spread), 1),
            "asOf": date.today().strftime("%Y-%m"),
            "shortRationale": "Offline estimate; configure GEMINI_API_KEY for live market data.",
        }
        chunks = [
            GroundingChunk(title="Sample market report", uri="https://example.com/multiples"),
            GroundingChunk(title="Sample funding tracker", uri="https://example.com/funding"),
        ]
        return ModelResponse(text=json.dumps(payload), grounding_chunks=chunks)
