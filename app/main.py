import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from app.config import Settings, check_live_credentials, get_settings
from app.database import engine
from app.log import configure_logging
from app import models
from app.schemas.responses import HealthResponse

logger = logging.getLogger(__name__)

WELCOME_TEXT = "Welcome to ShopAntik SSLCommerz Payment Integration"


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings)
    # Refuse to serve live traffic with sandbox credentials
    check_live_credentials(settings)

    logger.info(
        "SSLCommerz configuration",
        extra={"mode": settings.mode},
    )
    logger.info("Store ID: %s", settings.sslc_store_id)
    logger.info("Backend URL: %s", settings.backend_url)
    logger.info("Frontend URL: %s", settings.frontend_url)

    models.Base.metadata.create_all(bind=engine)
    logger.info("SSLCommerz running in %s mode", "LIVE PRODUCTION" if settings.is_live else "SANDBOX")
    yield


app = FastAPI(
    title="ShopAntik Payment Relay",
    description="Bridges the checkout flow to SSLCommerz: sessions, redirects and payment notifications",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/", response_class=PlainTextResponse)
def welcome():
    return WELCOME_TEXT


@app.get("/health", response_model=HealthResponse)
def health_check(settings: Settings = Depends(get_settings)):
    return {"status": "ok", "service": settings.service_name, "mode": settings.mode}


from app.routers import payments, redirects  # noqa: E402
app.include_router(redirects.router, prefix="/payment", tags=["redirects"])
app.include_router(payments.router, prefix="/api/payment", tags=["payments"])
