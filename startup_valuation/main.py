from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routers.valuation import router as valuation_router

from .core.config import settings
from .core.logging import configure_logging, CorrelationIdMiddleware
from .core.metrics import PromMiddleware, metrics_endpoint

def create_app() -> FastAPI:
    """Valuation + chat API: JSON logs with request ids, CORS, optional Prometheus scrape."""
    configure_logging()

    app = FastAPI(
        title="Startup Valuation Chat API",
        version="1.0.0",
        description="Revenue-multiple valuations from grounded market data, adjustable through chat.",
    )

    # The browser client is served from another origin
    allow_origins = [o.strip() for o in settings.ALLOW_ORIGINS.split(",")] if settings.ALLOW_ORIGINS else ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-Id"],
    )

    app.add_middleware(CorrelationIdMiddleware)
    if settings.PROMETHEUS_ENABLED:
        app.add_middleware(PromMiddleware)

    # Liveness
    @app.get("/api/health", tags=["meta"])
    def health():
        return {"status": "ok"}

    @app.get("/api/ping", tags=["meta"])
    def ping():
        return {"pong": True}

    if settings.PROMETHEUS_ENABLED:
        app.add_route("/api/metrics", metrics_endpoint, methods=["GET"])

    app.include_router(valuation_router, prefix="/api", tags=["valuation"])

    return app

app = create_app()
