"""Flight recommendation — FlightRecommendationRequest → ranked flights."""

from app.schemas.flight import FlightRecommendation, FlightRecommendationRequest
from app.services.ai.strategies import format_rfc3339, parse_json_document
from app.services.errors import InvalidDomainOutputError

SYSTEM_PROMPT = """You are an AI Flight Recommendation Assistant specialized in analyzing travel requirements and suggesting optimal flight options. Your task is to recommend flights based on the provided criteria and explain your reasoning.

Output must be a valid JSON object with this exact structure:
{
    "recommendations": [
        {
            "airline": "string",
            "flight_number": "string",
            "departure_city": "string",
            "departure_time": "YYYY-MM-DDTHH:MM:SSZ",
            "arrival_city": "string",
            "arrival_time": "YYYY-MM-DDTHH:MM:SSZ",
            "class": "string",
            "price": number,
            "currency": "ISO 4217 code, e.g. USD",
            "layover_count": number,
            "total_duration": "string",
            "available_seats": number,
            "recommendation_score": number
        }
    ],
    "reasoning": "string explaining why these flights were recommended"
}

Recommendation Rules:
1. Order recommendations best first
2. Prioritize direct flights when available
3. Consider price-to-convenience ratio
4. Account for reasonable connection times (2-4 hours)
5. Factor in airline reliability and service quality
6. Consider time of day and arrival/departure convenience
7. Account for seasonal factors and typical delays
8. Consider airport-specific factors

Return only the JSON object, no additional text or explanation."""

USER_PROMPT = """Analyze this flight request and provide recommendations:

TRAVEL DETAILS:
- Departure: {departure_city}
- Destination: {destination}
- Departure Date: {departure_date}
- Return Date: {return_date}
- Preferred Class: {preferred_class}
- Maximum Budget: {max_budget:.2f}
- Passengers: {passengers}

Additional Context:
{additional_context}

Please recommend optimal flights considering:
1. Price within budget ({per_passenger:.2f} per passenger)
2. Convenient departure/arrival times
3. Airline reliability
4. Connection efficiency
5. Overall value

Format recommendations according to the specified JSON structure."""


class FlightRecommendationPromptStrategy:
    def get_system_prompt(self) -> str:
        return SYSTEM_PROMPT

    def get_user_prompt(self, req: FlightRecommendationRequest) -> str:
        passengers = max(req.passengers, 1)
        return USER_PROMPT.format(
            departure_city=req.departure_city,
            destination=req.destination,
            departure_date=format_rfc3339(req.departure_date),
            return_date=format_rfc3339(req.return_date),
            preferred_class=req.preferred_class,
            max_budget=req.max_budget,
            passengers=req.passengers,
            additional_context=req.additional_context or "No additional context provided",
            per_passenger=req.max_budget / passengers,
        )


class FlightRecommendationDecodingStrategy:
    def decode_response(self, content: str) -> FlightRecommendation:
        recommendation = parse_json_document(content, FlightRecommendation, "flight recommendations")
        self._validate(recommendation)
        return recommendation

    @staticmethod
    def _validate(rec: FlightRecommendation) -> None:
        if not rec.recommendations:
            raise InvalidDomainOutputError("invalid flight recommendations: no flight recommendations provided")

        for i, flight in enumerate(rec.recommendations, start=1):
            if not flight.airline.strip():
                raise InvalidDomainOutputError(f"invalid flight recommendations: missing airline for recommendation {i}")
            if not flight.flight_number.strip():
                raise InvalidDomainOutputError(f"invalid flight recommendations: missing flight number for recommendation {i}")
            if flight.price <= 0:
                raise InvalidDomainOutputError(f"invalid flight recommendations: invalid price for recommendation {i}")

        if not rec.reasoning.strip():
            raise InvalidDomainOutputError("invalid flight recommendations: missing recommendation reasoning")
