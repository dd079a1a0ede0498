from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.api.routes import health, internal, reports
from app.core.config import get_settings
from app.core.logging import get_logger, setup_logging
from app.db.session import init_db_for_startup
from app.services.record_parser import AttendanceDataError

logger = get_logger(__name__)


def create_app() -> FastAPI:
    """
    Application factory for the Gym Attendance Analytics service.
    """
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, json_logs=settings.LOG_JSON)

    app = FastAPI(
        title=settings.APP_NAME,
        description=(
            "Backend service that turns raw gym check-in/check-out records into\n"
            "per-user attendance summaries and headline statistics for the admin\n"
            "check-ins screen and dashboard."
        ),
        version="0.1.0",
    )

    # Routers
    app.include_router(health.router)
    app.include_router(reports.router)
    app.include_router(internal.router)

    @app.exception_handler(AttendanceDataError)
    async def attendance_data_error_handler(
        request: Request, exc: AttendanceDataError
    ) -> JSONResponse:
        logger.warning(
            "attendance_data_rejected",
            path=request.url.path,
            record_id=exc.record_id,
            field=exc.field,
            error=str(exc),
        )
        return JSONResponse(
            status_code=HTTPStatus.UNPROCESSABLE_ENTITY,
            content={"detail": str(exc)},
        )

    @app.on_event("startup")
    async def on_startup() -> None:  # pragma: no cover
        await init_db_for_startup()

    return app


app = create_app()
