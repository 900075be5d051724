from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator
from starlette.requests import Request

from ticketqr.api.deps import get_qr_config
from ticketqr.api.v1.router import api_router
from ticketqr.core.errors import MintFailure
from ticketqr.core.logging import log_error, logger, setup_logging
from ticketqr.db.bootstrap import run_migrations

setup_logging()

api = FastAPI(
    title="Ticket QR - Dynamic ticket codes",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    swagger_ui_parameters={"displayRequestDuration": True},
)

api.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # ajuste para domínios específicos em produção
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# métricas /metrics (Prometheus)
Instrumentator().instrument(api).expose(api, include_in_schema=False, should_gzip=True)

api.include_router(api_router, prefix="/api/v1")

@api.get("/healthz", tags=["health"])
def healthz():
    return {"status": "ok"}

@api.on_event("startup")
def startup():
    # falha cedo se a chave/intervalos estiverem errados
    cfg = get_qr_config()
    logger.info(f"QR config loaded | epoch: {cfg.epoch_seconds}s | refresh: {cfg.refresh_seconds}s | skew: {cfg.skew_epochs}")
    run_migrations()

@api.exception_handler(MintFailure)
def handle_mint_failure(request: Request, exc: MintFailure):
    return JSONResponse(
        status_code=503,
        content={"code": "MINT_FAILED", "message": "Unable to display ticket."},
    )

@api.exception_handler(Exception)
def handle_unexpected(request: Request, exc: Exception):
    log_error("Unhandled error", exc, {"path": request.url.path})
    return JSONResponse(
        status_code=500,
        content={"code": "INTERNAL_ERROR", "message": "Erro interno."},
    )
