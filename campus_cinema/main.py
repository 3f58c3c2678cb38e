import asyncio
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from campus_cinema.db.init_db import init_db
from campus_cinema.db.session import engine, SessionLocal
from campus_cinema.core.config import settings
from campus_cinema.core.errors import CinemaError, HallConflict
from campus_cinema.services.cinema import Cinema
from campus_cinema.api.v1.router import api_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


async def _schedule_cleanup_loop(cinema: Cinema, interval: int) -> None:
    """Background task: deactivate schedules that have ended."""
    while True:
        try:
            db = SessionLocal()
            try:
                cinema.schedules.retire_past_schedules(db)
            finally:
                db.close()
        except Exception:
            logger.exception("Error during past-schedule cleanup.")
        await asyncio.sleep(interval)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: Ensure DB exists and create tables
    init_db(engine)

    cinema = Cinema(SessionLocal)
    cinema.start()
    app.state.cinema = cinema

    cleanup_task = None
    if settings.SCHEDULE_CLEANUP_INTERVAL_SECONDS > 0:
        cleanup_task = asyncio.create_task(
            _schedule_cleanup_loop(cinema, settings.SCHEDULE_CLEANUP_INTERVAL_SECONDS)
        )
    yield

    # Shutdown: cancel background task
    if cleanup_task is not None:
        cleanup_task.cancel()
        try:
            await cleanup_task
        except asyncio.CancelledError:
            pass


async def cinema_error_handler(request: Request, exc: CinemaError) -> JSONResponse:
    content = {"error": exc.code, "message": exc.message}
    if isinstance(exc, HallConflict) and exc.conflicting_schedule_id:
        content["conflicting_schedule_id"] = str(exc.conflicting_schedule_id)
    return JSONResponse(status_code=exc.status_code, content=content)


from fastapi.middleware.cors import CORSMiddleware

app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)

# Set all CORS enabled origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(CinemaError, cinema_error_handler)

app.include_router(api_router, prefix=settings.API_V1_STR)

@app.get("/")
def read_root():
    return {"Hello": "Campus Cinema"}
