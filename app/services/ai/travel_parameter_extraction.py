"""Travel parameter extraction — booking query → TravelParameters."""

from datetime import datetime, timezone
from typing import Callable

from app.schemas.booking import BookingRequest
from app.schemas.travel import TravelParameters
from app.services.ai.strategies import as_utc, format_rfc3339, parse_json_document
from app.services.errors import InvalidDomainOutputError

SYSTEM_PROMPT = """You are an AI travel assistant specialized in extracting structured travel information from natural language requests.

Output must be a valid JSON object with this exact structure:
{
    "departure_city": "city name",
    "destination": "city name",
    "departure_date": null,
    "return_date": null,
    "preferences": {
        "budget_range": {
            "min": null,
            "max": null
        },
        "travel_class": "",
        "activities": [],
        "dietary_restrictions": []
    }
}

Extraction Rules:
1. Use null for missing or uncertain values
2. Format dates as RFC3339 (e.g., "2024-01-15T12:00:00Z")
3. Resolve relative dates ("next Friday", "March 10th") against today's date; never pick a date in the past
4. For trips given as a duration ("a 3-day trip"), derive return_date from departure_date
5. Use empty arrays [] for missing lists
6. Convert prices to numbers without currency symbols
7. Normalize city names to official names
8. Extract both explicit and implicit requirements

Return only the JSON object, no additional text."""

USER_PROMPT = """Extract travel parameters from this request:

REQUEST TEXT:
{query}

BOOKING DEADLINE:
{deadline}

TODAY:
{today}

Required Parameters:
- Departure and destination cities
- Travel dates
- Budget information
- Travel preferences and requirements

Format as specified JSON structure."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ExtractionPromptStrategy:
    """Renders the extraction prompts for a BookingRequest."""

    def __init__(self, clock: Callable[[], datetime] = _utcnow):
        self._clock = clock

    def get_system_prompt(self) -> str:
        return SYSTEM_PROMPT

    def get_user_prompt(self, req: BookingRequest) -> str:
        return USER_PROMPT.format(
            query=req.query,
            deadline=format_rfc3339(req.deadline),
            today=self._clock().date().isoformat(),
        )


class ExtractionDecodingStrategy:
    """Parses and validates TravelParameters.

    Rule order (first failure wins): cities present, dates present,
    departure not in the past, return not before departure.
    """

    def __init__(self, clock: Callable[[], datetime] = _utcnow):
        self._clock = clock

    def decode_response(self, content: str) -> TravelParameters:
        params = parse_json_document(content, TravelParameters, "travel parameters")
        self._validate(params)
        return params

    def _validate(self, params: TravelParameters) -> None:
        if not params.departure_city.strip():
            raise InvalidDomainOutputError("invalid travel parameters: departure city is required")
        if not params.destination.strip():
            raise InvalidDomainOutputError("invalid travel parameters: destination is required")
        if params.departure_date is None:
            raise InvalidDomainOutputError("invalid travel parameters: departure date is required")
        if params.return_date is None:
            raise InvalidDomainOutputError("invalid travel parameters: return date is required")

        departure = as_utc(params.departure_date)
        today = as_utc(self._clock()).date()
        if departure.date() < today:
            raise InvalidDomainOutputError("invalid travel parameters: departure date cannot be in the past")

        if as_utc(params.return_date) < departure:
            raise InvalidDomainOutputError("invalid travel parameters: return date cannot be before departure date")
