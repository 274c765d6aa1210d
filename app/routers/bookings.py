"""Bookings router — create a booking from a natural-language request."""

import logging
import uuid
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from app.schemas.booking import BookingRequest, BookingResponse, BookingStatus, BookingStatusResponse
from app.services.booking_service import BookingService
from app.services.errors import DeadlineExceededError, TravelAgentError, is_client_error, root_cause

logger = logging.getLogger(__name__)

router = APIRouter()


def get_booking_service(request: Request) -> BookingService:
    return request.app.state.booking_service


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _validate_booking_request(req: BookingRequest) -> str | None:
    if not req.query.strip():
        return "query cannot be empty"
    if req.deadline < datetime.now(timezone.utc):
        return "deadline cannot be in the past"
    return None


@router.post("", response_model=BookingResponse)
async def create_booking(
    req: BookingRequest,
    service: BookingService = Depends(get_booking_service),
):
    """Extract trip parameters, get flight recommendations, return the booking."""
    problem = _validate_booking_request(req)
    if problem:
        return error_response(400, problem)

    try:
        return await service.process_booking(req)
    except TravelAgentError as e:
        if is_client_error(e):
            logger.info(f"Booking rejected: {e}")
            return error_response(400, str(e))
        if isinstance(root_cause(e), DeadlineExceededError):
            logger.warning(f"Booking timed out: {e}")
            return error_response(504, str(e))
        logger.error(f"Booking failed: {e}")
        return error_response(500, str(e))


@router.get("/status", response_model=BookingStatusResponse)
async def get_booking_status(booking_id: str | None = Query(None, alias="id")):
    """Bookings are not persisted; every known-format id reports ``processing``."""
    if not booking_id:
        return error_response(400, "Booking ID is required")
    try:
        uuid.UUID(booking_id)
    except ValueError:
        return error_response(400, "Booking ID must be a UUID")
    return BookingStatusResponse(id=booking_id, status=BookingStatus.PROCESSING)
