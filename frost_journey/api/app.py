import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from frost_journey.config import EngineConfig, load_config
from frost_journey.generation import GenerationService, HttpGenerationService, ScriptedGenerationService
from frost_journey.session import NarrativeSession

from .routes import router

logger = logging.getLogger(__name__)


def build_service(config: EngineConfig) -> GenerationService:
    if config.scripted:
        logger.info("using scripted generation service")
        return ScriptedGenerationService()
    if not config.api_key:
        logger.warning("GENAI_API_KEY is not set; replies will fall back to the fixed text")
    return HttpGenerationService(
        api_key=config.api_key,
        base_url=config.base_url,
        text_model=config.text_model,
        image_model=config.image_model,
    )


def create_app(session: NarrativeSession | None = None, config: EngineConfig | None = None) -> FastAPI:
    if session is None:
        resolved = config or load_config()
        session = NarrativeSession(build_service(resolved), config=resolved)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        session.close()

    app = FastAPI(title="Frost Journey", lifespan=lifespan)
    app.state.session = session
    app.include_router(router, prefix="/api")
    return app


# Default app instance for uvicorn (reads .env and the environment)
app = create_app()
