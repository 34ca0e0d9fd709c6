from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

# Database migrations are managed exclusively via Alembic
from app.routers import reports, scheduling
from app.models import volunteer, event
from app.core.config import settings
from app.database.engine import session_factory
from app.services.report_service import ReportService

# Configure logging
logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # NOTE: Database migrations are managed by Alembic exclusively.
    # Run: alembic upgrade head
    logger.info("Starting application...")

    app.state.report_service = ReportService(
        session_factory,
        max_concurrent_reads=settings.REPORT_MAX_CONCURRENT_READS,
        sub_read_timeout=settings.REPORT_SUB_READ_TIMEOUT_SECONDS,
    )
    logger.info(
        f"✓ Report service ready ({settings.REPORT_MAX_CONCURRENT_READS} concurrent reads)"
    )

    logger.info("Application startup complete")

    yield

    # Cleanup on shutdown
    logger.info("Application shutdown initiated...")
    app.state.report_service.close()
    logger.info("✓ Report service stopped")
    logger.info("Application shutdown complete")

app = FastAPI(
    title="Volunteer Hub Reporting Backend",
    description="Volunteer activity reports and US-Eastern shift time conversion",
    version="1.0.0",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        settings.FRONTEND_URL,  # Frontend URL from settings
        "http://localhost:3000",  # React default
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(reports.router)      # Reports: /reports/* (event, volunteer and group reports)
app.include_router(scheduling.router)   # Scheduling: /scheduling/* (Eastern <-> UTC shift times)

@app.get("/")
def read_root():
    return {
        "message": "Welcome to Volunteer Hub Reporting API",
        "version": "1.0.0",
        "modules": {
            "reports": "/reports/* (event, volunteer and group reports)",
            "scheduling": "/scheduling/* (shift time conversion in US-Eastern time)"
        },
        "docs": "/docs",
        "redoc": "/redoc"
    }

@app.get("/health")
def health_check():
    return {"status": "healthy"}
