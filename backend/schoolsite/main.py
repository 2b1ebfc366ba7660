"""School Site - public site and admin panel API."""
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from schoolsite.config import get_settings
from schoolsite.errors import UnhandledErrorMiddleware, register_exception_handlers

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup: create tables, provision the admin and seed site content
    from schoolsite.database import Base, engine, SessionLocal
    from schoolsite.services.content_loader import load_site_content
    from schoolsite.services.provisioning import ensure_admin_credential

    # Import all models so they're registered with Base
    from schoolsite import models  # noqa: F401

    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        ensure_admin_credential(db)
        load_site_content(db)
    finally:
        db.close()

    yield


app = FastAPI(
    title=settings.app_name,
    description="School website content and admin panel",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(UnhandledErrorMiddleware)

# Admin calls carry their token in the body, not in cookies
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)

register_exception_handlers(app)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "app": settings.app_name}


# Import and include routers
from schoolsite.api import admin_auth, admin_data, public  # noqa: E402

app.include_router(admin_auth.router, prefix="/api")
app.include_router(admin_data.router, prefix="/api")
app.include_router(public.router, prefix="/api")
