import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import SQLModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.responses import envelope
from app.core.config import settings
from app.core.logging import setup_logging
from app.db.session import engine
from app.services.errors import DescriptionAppError, ValidationFailedError

# IMPORTANT : On doit importer les modèles ici pour que SQLModel les "voie"
# et puisse créer les tables au démarrage.
from app.models.store import Store
from app.models.description import CategoryDescription

from app.api.v1.endpoints import categories, descriptions, install, public

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Fonction exécutée au démarrage (avant le yield)
    et à l'arrêt (après le yield) de l'application.
    """
    setup_logging()
    logger.info("Démarrage de %s (descriptions: %s)", settings.PROJECT_NAME, settings.DESCRIPTION_SOURCE)
    SQLModel.metadata.create_all(engine)
    logger.info("Tables synchronisées")
    yield
    logger.info("Arrêt de %s", settings.PROJECT_NAME)


# --- Tout finit dans l'enveloppe {success, data, message} ---

async def app_error_handler(request: Request, exc: DescriptionAppError):
    errors = exc.errors if isinstance(exc, ValidationFailedError) else None
    return envelope(message=exc.message, status_code=exc.status_code, errors=errors)

async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = {}
    for error in exc.errors():
        loc = error.get("loc", ())
        field = str(loc[-1]) if len(loc) > 1 else str(loc[0] if loc else "body")
        errors.setdefault(field, []).append(error.get("msg", "Invalid value"))
    return envelope(message="Validation failed", status_code=422, errors=errors)

async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return envelope(message=str(exc.detail), status_code=exc.status_code)

async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Erreur inattendue sur %s %s", request.method, request.url.path)
    return envelope(message=f"Unexpected error: {exc}", status_code=500)


def create_app(description_source: Optional[str] = None) -> FastAPI:
    source = description_source or settings.DESCRIPTION_SOURCE

    app = FastAPI(
        title=settings.PROJECT_NAME,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Configuration CORS (le panneau marchand est servi depuis l'admin Nuvemshop)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(DescriptionAppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    # Inclusion des routes
    app.include_router(install.router, prefix="/api/ns", tags=["Installation"])

    if source == "platform":
        app.include_router(categories.router, prefix="/api/descriptions", tags=["Descriptions"])
        app.include_router(
            categories.router,
            prefix="/api/stores/{store_id}/descriptions",
            tags=["Descriptions"],
        )
    else:
        app.include_router(descriptions.router, prefix="/api/descriptions", tags=["Descriptions"])
        app.include_router(public.router, prefix="/public/descriptions", tags=["Public"])

    @app.get("/")
    def read_root():
        return {"status": "online", "message": f"{settings.PROJECT_NAME} is running"}

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    return app


app = create_app()
