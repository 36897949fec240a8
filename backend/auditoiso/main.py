"""
AuditoIso - FastAPI Application Entry Point
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from auditoiso.config import settings
from auditoiso.db import StoreError, init_db
from auditoiso.api.endpoints import audits, auth, checklists, health, reports
from auditoiso.logger import logger
from auditoiso.services.user_store import UserStore, ensure_default_admin

# Create app
app = FastAPI(
    title=settings.APP_NAME,
    description="Compliance audit records (ISO 9001, ISO 14001) with PDF reports",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.FRONTEND_URL == "*" else settings.CORS_ORIGINS,
    allow_credentials=settings.FRONTEND_URL != "*",
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router)
app.include_router(auth.router, prefix="/api/auth")
app.include_router(checklists.router, prefix="/api/checklists")
app.include_router(audits.router, prefix="/api/audits")
app.include_router(reports.router, prefix="/api/reports")


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    logger.error(f"Storage failure on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Error de almacenamiento"})


@app.on_event("startup")
async def startup():
    """Initialize on startup."""
    logger.info(f"Starting {settings.APP_NAME}...")
    db = init_db(settings.DATA_DIR)
    ensure_default_admin(UserStore(db))
    logger.info("Database initialized")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "app": settings.APP_NAME,
        "version": "1.0.0",
        "docs": "/docs"
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
