import logging

from ..core.config import settings
from ..core.errors import InvalidAmount, MarketDataUnavailable
from ..core.utils import parse_amount, sanitize_text
from ..data.market_data import MarketDataRetriever
from ..models.base import GenerativeModel
from ..models.gemini_model import GeminiModel
from ..models.mock_model import MockModel
from ..schemas import ChatResponse, QuickValuationResponse, ValuationSnapshot
from .calculator import compute
from .explanations import ExplanationGenerator
from .intents import apply_intents

logger = logging.getLogger(__name__)

INVALID_REVENUE_REPLY = "Please use a valid ARR format (e.g., 2Cr, 15L, 85k)"
MARKET_DATA_REPLY = "Unable to fetch fresh market data right now. Please try again."
APOLOGY_REPLY = "Sorry, I encountered an error processing your request. Please try again."

class ValuationService:
    """
    Orchestrates:
      quick valuation: amount → grounded multiples → range → explanation bullets
      chat turn:       sanitize → intents → (fresh multiples) → range → reply
    Snapshots are immutable values; a failed turn always hands back the
    snapshot it was given.
    """
    def __init__(self, model: GenerativeModel | None = None):
        if model is None:
            # Pick model provider based on env
            model = MockModel() if settings.MODEL_PROVIDER == "mock" else GeminiModel()
        self.model = model
        self.market = MarketDataRetriever(model)
        self.explainer = ExplanationGenerator(model)

    async def quick_valuation(
        self,
        revenue_or_mrr: str | float,
        sector: str,
        is_mrr: bool = False,
        region: str | None = None,
        currency: str | None = None,
        stage: str | None = None,
    ) -> QuickValuationResponse:
        """
        Build a first snapshot from user input and a live multiples lookup.

        Raises InvalidAmount for an unparseable amount and MarketDataUnavailable
        when the lookup and its retry both fail.
        """
        revenue = parse_amount(revenue_or_mrr)
        if is_mrr:
            revenue *= 12
        region = region or settings.DEFAULT_REGION
        currency = currency or settings.DEFAULT_CURRENCY
        stage = stage or settings.DEFAULT_STAGE

        market = await self.market.fetch_multiples(sector, region, stage)
        snapshot = ValuationSnapshot(
            revenue=revenue,
            sector=sector,
            region=region,
            stage=stage,
            currency=currency,
            multiple_set=market.multiple_set,
        )
        valuation = compute(snapshot.revenue, snapshot.multiple_set)

        try:
            bullets = await self.explainer.bullets(snapshot, valuation)
        except Exception:
            # The range stands on its own; the narrative is optional.
            logger.warning("explanation generation failed", exc_info=True)
            bullets = []

        return QuickValuationResponse(
            snapshot=snapshot,
            valuation=valuation,
            explanation_bullets=bullets,
            citations=market.citations,
        )

    async def chat_turn(self, message: str, snapshot: ValuationSnapshot) -> ChatResponse:
        """
        One conversational adjustment. Never raises: failures become replies
        carrying the snapshot as received and no valuation.
        """
        try:
            text = sanitize_text(message, settings.MAX_MESSAGE_CHARS)
            try:
                outcome = apply_intents(snapshot, text)
            except InvalidAmount:
                return ChatResponse(reply=INVALID_REVENUE_REPLY, snapshot=snapshot, valuation=None)

            updated = outcome.snapshot
            citations = []
            if outcome.needs_fresh_market_data:
                try:
                    market = await self.market.fetch_multiples(updated.sector, updated.region, updated.stage)
                except MarketDataUnavailable:
                    logger.warning("fresh multiples unavailable; keeping snapshot")
                    return ChatResponse(reply=MARKET_DATA_REPLY, snapshot=snapshot, valuation=None)
                updated = updated.model_copy(update={"multiple_set": market.multiple_set})
                citations = market.citations

            valuation = compute(updated.revenue, updated.multiple_set)
            reply = await self.explainer.reply(text, updated, valuation)
        except Exception:
            logger.exception("chat turn failed")
            return ChatResponse(reply=APOLOGY_REPLY, snapshot=snapshot, valuation=None)

        if citations:
            return ChatResponse(reply=reply, snapshot=updated, valuation=valuation, citations=citations)
        return ChatResponse(reply=reply, snapshot=updated, valuation=valuation)
