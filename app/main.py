from fastapi import FastAPI
from contextlib import asynccontextmanager
from fastapi.middleware.cors import CORSMiddleware
from app.api.v1.router import api_router
from app.core.config import settings
from app.core.logging import console_logger
from app.core.middleware import RequestLoggingMiddleware, ErrorHandlingMiddleware, register_exception_handlers


@asynccontextmanager
async def lifespan(app: FastAPI):

    # Startup: fail fast on missing or invalid configuration
    settings.validate_required()
    console_logger.info(
        "startup",
        environment=settings.ENVIRONMENT,
        subscription_prices=len(settings.SUBSCRIPTION_PRICE_INTERVALS),
    )

    yield

app = FastAPI(
    title="JMEFit Checkout Backend",
    description="Stripe checkout, coupons and catalog sync for the JMEFit storefront",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(ErrorHandlingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(api_router)
