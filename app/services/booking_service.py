"""Booking service — runs extraction then recommendation for one booking request."""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Protocol, TypeVar

from app.config import settings
from app.schemas.booking import BookingRequest, BookingResponse, BookingStatus
from app.schemas.flight import FlightRecommendation, FlightRecommendationRequest
from app.schemas.travel import TravelParameters
from app.services.ai.flight_recommendations import (
    FlightRecommendationDecodingStrategy,
    FlightRecommendationPromptStrategy,
)
from app.services.ai.strategies import DecodingStrategy, PromptStrategy
from app.services.ai.travel_parameter_extraction import (
    ExtractionDecodingStrategy,
    ExtractionPromptStrategy,
)
from app.services.errors import (
    EmptyQueryError,
    ExtractionFailedError,
    InvalidDomainOutputError,
    NoRecommendationsError,
    RecommendationFailedError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class Inference(Protocol[T, R]):
    """Anything that can run a strategy pair, e.g. InferenceEngine."""

    async def process_request(
        self,
        prompt_strategy: PromptStrategy[R],
        request: R,
        decoding_strategy: DecodingStrategy[T],
        *,
        timeout: float | None = None,
    ) -> T: ...


@dataclass(frozen=True)
class BookingDefaults:
    """Policy values used when the traveler's request leaves them open."""
    travel_class: str = "economy"
    passengers: int = 1
    max_budget: float = 5000.0     # ceiling for the whole party

    @classmethod
    def from_settings(cls) -> "BookingDefaults":
        return cls(
            travel_class=settings.booking_default_class,
            passengers=settings.booking_default_passengers,
            max_budget=settings.booking_default_max_budget,
        )


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BookingService:
    """Two-stage booking: parameter extraction → flight recommendation.

    Stages run strictly in order and any failure aborts the attempt; the
    caller gets one wrapped error and no partial booking.
    """

    def __init__(
        self,
        extraction: Inference[TravelParameters, BookingRequest],
        recommendation: Inference[FlightRecommendation, FlightRecommendationRequest],
        *,
        defaults: BookingDefaults | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.extraction = extraction
        self.recommendation = recommendation
        self.defaults = defaults or BookingDefaults()
        self._clock = clock

        # Strategy pairs are bound once here, one per stage
        self._extraction_prompt = ExtractionPromptStrategy(clock=clock)
        self._extraction_decoder = ExtractionDecodingStrategy(clock=clock)
        self._recommendation_prompt = FlightRecommendationPromptStrategy()
        self._recommendation_decoder = FlightRecommendationDecodingStrategy()

    async def process_booking(self, req: BookingRequest, *, timeout: float | None = None) -> BookingResponse:
        """Turn a natural-language booking request into a BookingResponse.

        ``timeout`` bounds each provider stage separately.
        """
        if not req.query.strip():
            raise EmptyQueryError()

        params = await self._extract_travel_parameters(req, timeout)
        rec_request = self._build_recommendation_request(params)
        recommendation = await self._recommend_flights(rec_request, timeout)

        return self._create_booking_response(req, params, recommendation)

    async def _extract_travel_parameters(self, req: BookingRequest, timeout: float | None) -> TravelParameters:
        logger.info("Extracting travel parameters")
        try:
            params = await self.extraction.process_request(
                self._extraction_prompt,
                req,
                self._extraction_decoder,
                timeout=timeout,
            )
        except Exception as e:
            logger.warning(f"Parameter extraction failed: {e}")
            raise ExtractionFailedError(e) from e
        logger.info(f"Extracted trip {params.departure_city} -> {params.destination}")
        return params

    def _build_recommendation_request(self, params: TravelParameters) -> FlightRecommendationRequest:
        """Adapt extracted parameters, filling gaps from the booking defaults."""
        missing = [
            field_name
            for field_name in ("departure_city", "destination", "departure_date", "return_date")
            if not getattr(params, field_name)
        ]
        if missing:
            err = InvalidDomainOutputError(f"travel parameters missing {', '.join(missing)}")
            raise ExtractionFailedError(err)

        prefs = params.preferences
        context_lines = []
        if prefs.activities:
            context_lines.append(f"Planned activities: {', '.join(prefs.activities)}")
        if prefs.dietary_restrictions:
            context_lines.append(f"Dietary restrictions: {', '.join(prefs.dietary_restrictions)}")
        if prefs.budget_range.min is not None:
            context_lines.append(f"Minimum budget: {prefs.budget_range.min:.2f}")

        return FlightRecommendationRequest(
            departure_city=params.departure_city,
            destination=params.destination,
            departure_date=params.departure_date,
            return_date=params.return_date,
            preferred_class=prefs.travel_class or self.defaults.travel_class,
            max_budget=prefs.budget_range.max or self.defaults.max_budget,
            passengers=self.defaults.passengers,
            additional_context="\n".join(context_lines),
        )

    async def _recommend_flights(
        self, rec_request: FlightRecommendationRequest, timeout: float | None
    ) -> FlightRecommendation:
        logger.info(f"Requesting flight recommendations to {rec_request.destination}")
        try:
            recommendation = await self.recommendation.process_request(
                self._recommendation_prompt,
                rec_request,
                self._recommendation_decoder,
                timeout=timeout,
            )
        except Exception as e:
            logger.warning(f"Flight recommendation failed: {e}")
            raise RecommendationFailedError(e) from e

        if not recommendation.recommendations:
            raise NoRecommendationsError()
        logger.info(f"Received {len(recommendation.recommendations)} flight recommendations")
        return recommendation

    def _create_booking_response(
        self,
        req: BookingRequest,
        params: TravelParameters,
        recommendation: FlightRecommendation,
    ) -> BookingResponse:
        now = self._clock()
        return BookingResponse(
            id=str(uuid.uuid4()),
            status=BookingStatus.PROCESSING,
            query=req.query,
            deadline=req.deadline,
            # Model returns flights best first
            flight=recommendation.recommendations[0],
            message=f"Searching for flights to {params.destination}",
            created_at=now,
            updated_at=now,
        )
