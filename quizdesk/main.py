from contextlib import asynccontextmanager
from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from quizdesk.core.config import settings
from quizdesk.core.logging import get_logger, setup_logging
from quizdesk.db.session import init_db
from quizdesk.middleware.monitoring_middleware import MonitoringMiddleware
from quizdesk.utils.error_handler import setup_exception_handlers
from quizdesk.api.v1 import submissions, quizzes, questions, learners, pins, results

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    setup_logging()
    logger.info("Starting Quizdesk API")

    await init_db()
    logger.info("Database tables created successfully")

    yield
    logger.info("Shutting down Quizdesk API")


def create_app() -> FastAPI:
    app = FastAPI(
        lifespan=lifespan,
        title="Quizdesk API",
        description="Quiz management backend: authoring, learner PIN registration and quiz scoring",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    setup_exception_handlers(app)

    # register middlewares
    app.add_middleware(MonitoringMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # api routes
    app.include_router(submissions.router, prefix="/api", tags=["Submissions"])
    app.include_router(quizzes.router, prefix="/quiz", tags=["Quizzes"])
    app.include_router(questions.router, prefix="/questions", tags=["Questions"])
    app.include_router(learners.router, prefix="/users", tags=["Learners"])
    app.include_router(pins.router, prefix="/admin/pins", tags=["PIN codes"])
    app.include_router(results.router, prefix="/admin/results", tags=["Results"])

    @app.get("/health")
    async def health_check():
        return {"status": "ok"}

    return app


app = create_app()
