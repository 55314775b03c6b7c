"""
Point d'entrée principal de l'API de gestion scolaire.
Démarrage : uvicorn schoolrecords.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import schoolrecords.models  # noqa: F401 (enregistre tous les modèles dans Base.metadata avant les routers)
from schoolrecords.config import settings
from schoolrecords.errors import (
    BackendUnavailable,
    InvalidArgument,
    InvalidCredentials,
    RecordsError,
)
from schoolrecords.routers import (
    admins,
    assignments,
    attendance,
    auth,
    classes,
    dashboard,
    payments,
    students,
    subjects,
    teachers,
)
from schoolrecords.startup import start_core, stop_core

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Cycle de vie : prépare la persistance au démarrage, la ferme à l'arrêt."""
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    app.state.core = start_core(settings)
    yield
    stop_core(app.state.core)


app = FastAPI(
    title="SchoolRecords API",
    description="API de gestion des élèves, enseignants, présences et frais de scolarité",
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

# CORS : tous les ports localhost en développement
app.add_middleware(
    CORSMiddleware,
    allow_origins=[],
    allow_origin_regex=r"https?://(localhost|127\.0\.0\.1)(:\d+)?",
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["Content-Type", "Authorization", "Accept"],
)


app.include_router(auth.router)
app.include_router(admins.router)
app.include_router(students.router)
app.include_router(teachers.router)
app.include_router(classes.router)
app.include_router(subjects.router)
app.include_router(assignments.router)
app.include_router(attendance.router)
app.include_router(payments.router)
app.include_router(dashboard.router)


@app.exception_handler(RecordsError)
async def records_error_handler(request: Request, exc: RecordsError) -> JSONResponse:
    """Refus métier qui n'ont pas été traduits par le router."""
    if isinstance(exc, BackendUnavailable):
        status_code = 503
    elif isinstance(exc, InvalidArgument):
        status_code = 400
    elif isinstance(exc, InvalidCredentials):
        status_code = 401
    elif isinstance(exc, ValueError):
        status_code = 409
    else:
        logger.error("Erreur de persistance : %s", exc, exc_info=True)
        status_code = 500
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Intercepte toutes les exceptions non gérées pour que la réponse 500
    passe par CORSMiddleware (qui injecte les headers CORS).
    """
    logger.error("Exception non gérée : %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Une erreur interne est survenue."},
    )


@app.get("/api/health", tags=["Santé"])
def health_check(request: Request):
    """Vérifie que l'API est opérationnelle et indique la base active."""
    core = getattr(request.app.state, "core", None)
    backend = core.connections.kind.value if core is not None else None
    return {"status": "ok", "service": "SchoolRecords API", "version": "0.1.0", "backend": backend}
