"""
Shared fixtures: a scripted stand-in for the generative model and a sample
snapshot. No network, no Gemini key.
"""

import json

import pytest

from startup_valuation.models.base import GroundingChunk, ModelResponse
from startup_valuation.schemas import MultipleSet, ValuationSnapshot


BULLET_TEXT = (
    "Here is why:\n"
    "• SaaS peers trade near this multiple.\n"
    "- Funding activity in India is recovering.\n"
    "* Key risk: customer concentration.\n"
)


def multiples_json(mid=10.0, low=8.0, high=12.5, as_of="2025-06", rationale="Peer median") -> str:
    return json.dumps({
        "multipleMid": mid,
        "multipleLow": low,
        "multipleHigh": high,
        "asOf": as_of,
        "shortRationale": rationale,
    })


def grounded(text: str, chunks=None) -> ModelResponse:
    return ModelResponse(text=text, grounding_chunks=chunks)


class FakeModel:
    """
    Returns queued responses for grounded calls and a fixed text for
    everything else. An Exception in either slot is raised instead.
    """

    def __init__(self, grounded_responses=None, text=BULLET_TEXT):
        self.grounded_responses = list(grounded_responses or [])
        self.text = text
        self.calls: list[tuple[str, bool]] = []

    async def generate(self, prompt: str, *, grounded: bool = False) -> ModelResponse:
        self.calls.append((prompt, grounded))
        if grounded:
            item = self.grounded_responses.pop(0)
        else:
            item = self.text
        if isinstance(item, Exception):
            raise item
        if isinstance(item, ModelResponse):
            return item
        return ModelResponse(text=item)

    @property
    def grounded_calls(self) -> list[str]:
        return [prompt for prompt, was_grounded in self.calls if was_grounded]


@pytest.fixture
def snapshot() -> ValuationSnapshot:
    return ValuationSnapshot(
        revenue=1e7,
        sector="SaaS",
        region="India",
        stage="Seed",
        currency="INR",
        multiple_set=MultipleSet(mid=10.0, low=8.5, high=12.0, as_of="2025-05", rationale="Seed SaaS comps"),
    )


@pytest.fixture
def bare_snapshot(snapshot) -> ValuationSnapshot:
    """Same snapshot but without low/high multiples."""
    return snapshot.model_copy(update={"multiple_set": MultipleSet(mid=10.0, as_of="2025-05")})


@pytest.fixture
def sources():
    return [
        GroundingChunk(title="Report A", uri="https://a.example"),
        GroundingChunk(title="Report B", uri="https://b.example"),
        GroundingChunk(title="Report C", uri="https://c.example"),
    ]
