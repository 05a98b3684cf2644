from dataclasses import dataclass
from typing import List, Optional, Protocol

from ..core.metrics import record_model_call

# ----- Response shapes (thin & explicit) -----

@dataclass
class GroundingChunk:
    title: Optional[str] = None
    uri: Optional[str] = None

@dataclass
class ModelResponse:
    text: str
    grounding_chunks: Optional[List[GroundingChunk]] = None  # None when the call used no grounding

# ----- Protocols (interfaces) -----

class GenerativeModel(Protocol):
    async def generate(self, prompt: str, *, grounded: bool = False) -> ModelResponse:
        """
        Send one prompt and return the raw text, plus web-search grounding
        sources when `grounded` is set and the provider supplied any.
        """
        ...

async def generate_recorded(
    model: GenerativeModel, prompt: str, purpose: str, *, grounded: bool = False
) -> ModelResponse:
    """
    `model.generate` that counts failed calls under `purpose`. Successful
    calls are counted by the caller once it knows whether the text was usable.
    """
    try:
        return await model.generate(prompt, grounded=grounded)
    except Exception:
        record_model_call(purpose, "error")
        raise
