import logging

from fastapi import APIRouter, Depends, HTTPException
from starlette.status import HTTP_400_BAD_REQUEST, HTTP_500_INTERNAL_SERVER_ERROR
from ..schemas import ChatRequest, ChatResponse, QuickValuationRequest, QuickValuationResponse
from ..services.valuation_service import ValuationService
from ..core.errors import InvalidAmount, MarketDataUnavailable
from ..core.security import rate_limit, require_model_credential

logger = logging.getLogger(__name__)

router = APIRouter()

def service_dep() -> ValuationService:
    # Cheap factory; the model client is created lazily on first call.
    return ValuationService()

@router.post("/valuation/quick", response_model=QuickValuationResponse)
async def post_quick_valuation(
    body: QuickValuationRequest,
    _lim = Depends(rate_limit),           # Rate limiting, before any model call
    svc: ValuationService = Depends(service_dep),
):
    amount = body.revenue_or_mrr.strip() if isinstance(body.revenue_or_mrr, str) else body.revenue_or_mrr
    missing_amount = amount in (None, "") or (not isinstance(amount, str) and amount <= 0)
    if missing_amount or not (body.sector or "").strip():
        raise HTTPException(status_code=HTTP_400_BAD_REQUEST, detail="ARR/MRR and sector are required")
    require_model_credential()

    try:
        result = await svc.quick_valuation(
            amount,
            body.sector.strip(),
            is_mrr=body.is_mrr,
            region=body.region,
            currency=body.currency,
            stage=body.stage,
        )
    except InvalidAmount as exc:
        raise HTTPException(status_code=HTTP_400_BAD_REQUEST, detail=str(exc))
    except MarketDataUnavailable:
        logger.warning("quick valuation: market data unavailable")
        raise HTTPException(
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to fetch current market data. Please try again.",
        )
    except Exception:
        logger.exception("quick valuation failed")
        raise HTTPException(
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate valuation. Please check your inputs and try again.",
        )
    return result

@router.post("/chat", response_model=ChatResponse, response_model_exclude_unset=True)
async def post_chat(
    body: ChatRequest,
    _lim = Depends(rate_limit),
    svc: ValuationService = Depends(service_dep),
):
    if not (body.message or "").strip() or body.snapshot is None:
        raise HTTPException(status_code=HTTP_400_BAD_REQUEST, detail="Message and snapshot are required")
    require_model_credential()

    result = await svc.chat_turn(body.message, body.snapshot)
    payload = result.model_dump(by_alias=True)
    if not result.citations:
        payload.pop("citations")
    return payload
