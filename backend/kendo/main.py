import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from kendo import settings
from kendo.database import init_db
from kendo.logging_config import configure_logging
from kendo.routes import tournaments

logger = logging.getLogger(__name__)

app = FastAPI(title="Kendo Tournaments API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(tournaments.router, prefix="/api", tags=["tournaments"])


@app.on_event("startup")
def on_startup():
    configure_logging()
    init_db()  # creates tables and seeds levels/categories
    logger.info("Kendo Tournaments API started (database: %s)", settings.DATABASE_URL)


@app.get("/api/health")
def health_check():
    return {"app_name": "Kendo Tournaments API", "status": "healthy"}
