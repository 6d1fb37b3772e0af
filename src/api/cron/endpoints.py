"""API endpoint that triggers a reminder pass."""

import logging
import time

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from src.reminders.models import PassReport
from src.reminders.runner import run_reminder_pass

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cron", tags=["Cron"])


@router.get(
    "/reminders",
    response_model=PassReport,
    summary="Run a reminder pass",
    responses={500: {"model": PassReport, "description": "Pass aborted by a fatal error"}},
)
def trigger_reminders() -> PassReport | JSONResponse:
    """Run one reminder pass and return its report.

    Safe to call repeatedly: a call made while another pass is in flight
    returns a report with skipped=true and does nothing.
    """
    start = time.perf_counter()
    logger.info("Reminder pass triggered")

    report = run_reminder_pass()

    if report.fatal_error:
        logger.error(f"Reminder pass aborted: {report.fatal_error}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=report.model_dump(mode="json"),
        )

    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(
        f"Reminder pass complete: processed={report.processed}, "
        f"skipped={report.skipped}, elapsed={elapsed_ms:.0f}ms"
    )
    return report
