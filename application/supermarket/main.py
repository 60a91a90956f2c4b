from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from supermarket.connections.database import close_db_pool
from supermarket.logging.utils import initialize_logging, get_app_logger
from supermarket.middlewares.logging_middleware import RequestLoggingMiddleware

from supermarket.config.settings import SupermarketConfigs
configs = SupermarketConfigs()

# Initialize Sentry (must be done early, before other imports)
from supermarket.config.sentry import init_sentry
init_sentry()

initialize_logging()
logger = get_app_logger('supermarket.main')

DEBUG = configs.DEBUG

logger.info(f"Running in {'debug' if DEBUG else 'production'} mode")


@asynccontextmanager
async def lifespan(_: FastAPI):
    logger.info(f"Starting {configs.APP_NAME}")
    yield
    logger.info(f"Shutting down {configs.APP_NAME}")
    close_db_pool()

# Disable docs in production (when DEBUG=false)
docs_url = "/docs" if DEBUG else None
redoc_url = "/redoc" if DEBUG else None

app = FastAPI(
    title="Supermarket Invoicing",
    version=configs.APP_VERSION,
    lifespan=lifespan,
    docs_url=docs_url,
    redoc_url=redoc_url
)

if configs.ALLOWED_ORIGINS:
    origins = [origin.strip() for origin in configs.ALLOWED_ORIGINS.split(",")]
else:
    origins = ["*"]

app.add_middleware(RequestLoggingMiddleware)

logger.info(f"Configuring CORS with allowed origins: {origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register custom exception handlers
from supermarket.middlewares.handlers import register_exception_handlers
register_exception_handlers(app)

# Routes
from supermarket.routes.health import router as health_router
from supermarket.routes.api import api_router

app.include_router(health_router)
app.include_router(api_router, prefix="/api/v1")
