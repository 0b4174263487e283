from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
import httpx
import logging

from .config import Settings
from .secretenv import init_secrets
from .routers import health, questions
from .services.ai import GeminiClient
from .services.fetcher import PdfFetcher
from .services.orchestrator import Orchestrator


logging.basicConfig(level=logging.INFO)
log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    http_client = None
    try:
        init_secrets()
        settings = Settings.from_env()
        http_client = httpx.AsyncClient()
        app.state.orchestrator = Orchestrator(
            settings,
            model_client=GeminiClient.from_settings(settings),
            fetcher=PdfFetcher(http_client, timeout=settings.fetch_timeout_seconds),
        )
        log.info(f"Using model {settings.gemini_model} in {settings.generation_mode.value} mode")
        yield # Application runs here
    except Exception as e:
        log.error(f"FastAPI startup error during init setup: {e}", exc_info=True)
        raise
    finally:
        if http_client is not None:
            await http_client.aclose()
        log.info("FastAPI shutdown: Cleaning up resources...")


app = FastAPI(lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


app.include_router(health.router)
app.include_router(questions.router)


if __name__ == "__main__":
    import os
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "4500")))
