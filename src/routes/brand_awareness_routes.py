"""
Brand Awareness Routes

Endpoints for running brand awareness analysis and fetching reports.
"""

import asyncio
import json
import logging

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import StreamingResponse
from pydantic import ValidationError

from models.schemas import BrandAwarenessRequest, BrandAwarenessReport
from src.controllers.brand_awareness_controller import analyze_brand_awareness_request
from src.controllers.cache_manager import get_report

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/brand-awareness", tags=["Brand Awareness"])


@router.post("/analyze", response_model=BrandAwarenessReport)
async def analyze_brand_awareness(request: BrandAwarenessRequest) -> BrandAwarenessReport:
    """
    Test what AI assistants know about a business.

    Generates brand recall, service check and competitor comparison queries,
    asks every provider every query in parallel and returns the scored,
    aggregated report. The report is persisted under its run_id.

    Raises:
        HTTPException 400: If the domain or a provider id is invalid
        HTTPException 500: If internal processing error occurs
    """
    try:
        return await analyze_brand_awareness_request(request)

    except ValidationError as e:
        # Subclass of ValueError, but raised by our own models: a server bug
        logger.error(f"Brand awareness report could not be built: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Internal server error: {str(e)}"
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid request: {str(e)}"
        )
    except Exception as e:
        logger.error(f"Brand awareness analysis failed: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Internal server error: {str(e)}"
        )


def emit(step: str, status: str, data: dict = None, message: str = "") -> str:
    event = {
        "step": step,
        "status": status,
        "message": message,
        "data": data or {}
    }
    return f"data: {json.dumps(event)}\n\n"


async def brand_awareness_stream(request: BrandAwarenessRequest):
    """
    Stream a brand awareness run as server-sent events.

    Emits one event per workflow stage, one "progress" event per provider
    call, then a final "complete" event carrying the report.
    """
    event_queue: asyncio.Queue = asyncio.Queue()

    def progress_callback(step, status, message, data):
        event_queue.put_nowait((step, status, message, data))
        logger.info(f"Progress: {step} - {message}")

    def on_progress(completed, total):
        event_queue.put_nowait((
            "progress", "in_progress",
            f"{completed}/{total} provider calls complete",
            {"completed": completed, "total": total}
        ))

    async def run_analysis():
        try:
            return await analyze_brand_awareness_request(
                request,
                progress_callback=progress_callback,
                on_progress=on_progress
            )
        finally:
            # Signal completion
            event_queue.put_nowait(None)

    task = asyncio.create_task(run_analysis())

    try:
        yield emit("start", "in_progress", {"domain": request.domain}, "Starting brand awareness analysis")

        while True:
            event = await event_queue.get()
            if event is None:
                break
            step, step_status, message, data = event
            yield emit(step, step_status, data, message)

        report = await task
        yield emit("complete", "success", report.model_dump(), "Brand awareness analysis completed!")

    except Exception as e:
        logger.error(f"Brand awareness stream failed: {str(e)}", exc_info=True)
        yield emit("error", "failed", {"error": str(e)}, f"Error: {str(e)}")
    finally:
        if not task.done():
            task.cancel()


@router.post("/stream")
async def stream_brand_awareness(request: BrandAwarenessRequest):
    """Run brand awareness analysis with real-time progress (SSE)."""
    return StreamingResponse(
        brand_awareness_stream(request),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no"
        }
    )


@router.get("/report/{run_id}")
async def get_brand_awareness_report(run_id: str):
    """
    Get a persisted brand awareness report by run_id.

    Raises:
        HTTPException 404: If no report exists for the run
    """
    report = get_report(run_id)

    if not report:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No brand awareness report found for run_id: {run_id}"
        )

    return report
