"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from timesheet.config import settings
from timesheet.database import database
from timesheet.routers import auth, projects, reports, timecards
from timesheet.routers import settings as settings_router

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown events."""
    await database.connect()
    yield
    await database.disconnect()


app = FastAPI(
    title="Timesheet API",
    description="Time tracking and reporting backend",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(settings_router.router)
app.include_router(projects.router)
app.include_router(timecards.router)
app.include_router(reports.router)


@app.get("/")
async def root():
    """Root endpoint - health check."""
    return {"status": "ok", "message": "Timesheet API"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
