from pydantic import AliasChoices, BaseModel, ConfigDict, Field

# ----- Domain values (immutable; each change produces a new instance) -----

class MultipleSet(BaseModel):
    """
    Revenue-multiple triple. `low`/`high` may be absent; consumers fall back
    to 0.8× / 1.2× of `mid` rather than assuming presence.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    mid: float
    low: float | None = None
    high: float | None = None
    as_of: str = Field(default="", validation_alias=AliasChoices("asOf", "as_of"), serialization_alias="asOf")
    rationale: str | None = Field(
        default=None,
        validation_alias=AliasChoices("rationale", "shortRationale"),
    )

    def effective_low(self) -> float:
        return self.low if self.low is not None else self.mid * 0.8

    def effective_high(self) -> float:
        return self.high if self.high is not None else self.mid * 1.2

class ValuationSnapshot(BaseModel):
    """Complete valuation state, round-tripped by the client on every chat turn."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    revenue: float = Field(validation_alias=AliasChoices("revenue", "arr"))  # annualized
    sector: str
    region: str
    stage: str
    currency: str
    multiple_set: MultipleSet = Field(
        validation_alias=AliasChoices("multipleSet", "multiples", "multiple_set"),
        serialization_alias="multipleSet",
    )

class ValuationRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    low: float
    mid: float
    high: float

class Citation(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int  # 1-based, in grounding order
    title: str
    uri: str

# ----- HTTP payloads -----

class QuickValuationRequest(BaseModel):
    # Optional here so missing fields surface as a 400 from the route, not a 422.
    revenue_or_mrr: str | float | None = Field(
        default=None, validation_alias=AliasChoices("revenueOrMrr", "arrOrMrr")
    )
    is_mrr: bool = Field(default=False, validation_alias=AliasChoices("isMRR", "isMrr"))
    sector: str | None = None
    region: str | None = None
    currency: str | None = None
    stage: str | None = None

class QuickValuationResponse(BaseModel):
    snapshot: ValuationSnapshot
    valuation: ValuationRange
    explanation_bullets: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("explanationBullets", "explanation_bullets"),
        serialization_alias="explanationBullets",
    )
    citations: list[Citation] = Field(default_factory=list)

class ChatRequest(BaseModel):
    message: str | None = None
    snapshot: ValuationSnapshot | None = None

class ChatResponse(BaseModel):
    reply: str
    snapshot: ValuationSnapshot | None = None
    valuation: ValuationRange | None = None
    citations: list[Citation] | None = None  # omitted entirely when empty
