"""FastAPI application with CORS, lifespan, and routes."""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import configure_logging, settings
from .api.routes import router, template_registry


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: load bundled and user templates
    configure_logging()
    template_registry.load_directory(settings.templates_dir)
    yield
    template_registry.clear()


app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)
