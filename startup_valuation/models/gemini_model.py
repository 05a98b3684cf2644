"""Gemini-backed generative model (google-genai SDK)."""

from __future__ import annotations

from typing import Any, List, Optional

from .base import GenerativeModel, GroundingChunk, ModelResponse
from ..core.config import settings


class GeminiModel(GenerativeModel):
    def __init__(self, api_key: Optional[str] = None, model_name: Optional[str] = None):
        self.api_key = api_key or settings.GEMINI_API_KEY
        self.model_name = model_name or settings.GEMINI_MODEL
        self._client = None

    @property
    def client(self):
        # Created on first use so constructing the model never needs the key.
        if self._client is None:
            if not self.api_key:
                raise RuntimeError("GEMINI_API_KEY missing from settings")
            from google import genai

            self._client = genai.Client(api_key=self.api_key)
        return self._client

    async def generate(self, prompt: str, *, grounded: bool = False) -> ModelResponse:
        """Call Gemini once, optionally with Google Search grounding.

        Parameters
        ----------
        prompt: str
            Full user prompt.
        grounded: bool
            Attach the Google Search tool and collect grounding sources.

        Returns
        -------
        ModelResponse
            Response text and normalized grounding chunks.
        """
        from google.genai import types

        config = None
        if grounded:
            config = types.GenerateContentConfig(
                tools=[types.Tool(google_search=types.GoogleSearch())],
            )

        response = await self.client.aio.models.generate_content(
            model=self.model_name,
            contents=prompt,
            config=config,
        )
        text = response.text or ""
        chunks = _grounding_chunks(response) if grounded else None
        return ModelResponse(text=text, grounding_chunks=chunks)


def _grounding_chunks(response: Any) -> Optional[List[GroundingChunk]]:
    candidates = getattr(response, "candidates", None)
    if not candidates:
        return None
    metadata = getattr(candidates[0], "grounding_metadata", None)
    raw_chunks = getattr(metadata, "grounding_chunks", None) if metadata else None
    if not raw_chunks:
        return None

    out: List[GroundingChunk] = []
    for chunk in raw_chunks:
        web = getattr(chunk, "web", None)
        out.append(GroundingChunk(
            title=getattr(web, "title", None) if web else None,
            uri=getattr(web, "uri", None) if web else None,
        ))
    return out
