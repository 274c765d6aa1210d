import logging
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path

import httpx
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings

# ─── Logging setup (file + console) ───
_LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
_LOG_DIR.mkdir(exist_ok=True)

_log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

logging.basicConfig(
    level=_log_level,
    format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    handlers=[
        logging.StreamHandler(),
        RotatingFileHandler(
            _LOG_DIR / "travel-agent.log",
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        ),
    ],
)

# Quiet noisy libraries
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

from app.routers import bookings
from app.services.ai.inference_engine import InferenceEngine
from app.services.ai.tools import CurrencyConversionTool
from app.services.booking_service import BookingDefaults, BookingService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: one pooled HTTP client shared by both engines
    http_client = httpx.AsyncClient(timeout=settings.ai_provider_timeout)

    try:
        extraction_engine = InferenceEngine(settings.mistral_api_key, http_client=http_client)
        recommendation_engine = InferenceEngine(
            settings.mistral_api_key,
            http_client=http_client,
            tool_follow_up=settings.ai_tools_enabled,
        )
    except Exception as e:
        await http_client.aclose()
        logger.error(f"Failed to initialize inference engines: {e}")
        raise

    if settings.ai_tools_enabled:
        recommendation_engine.register_tool(CurrencyConversionTool())

    app.state.booking_service = BookingService(
        extraction_engine,
        recommendation_engine,
        defaults=BookingDefaults.from_settings(),
    )
    logger.info(f"Booking service ready (model={settings.ai_provider_model}, tools={settings.ai_tools_enabled})")

    yield

    # Shutdown
    await http_client.aclose()
    logger.info("AI provider client closed")


app = FastAPI(
    title="AI Travel Agent",
    description="Natural-language flight booking backed by an LLM provider",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": "Invalid request body", "details": jsonable_encoder(exc.errors())})


app.include_router(bookings.router, prefix="/api/v1/bookings", tags=["bookings"])


@app.get("/health")
async def health_check():
    return {"status": "OK"}
