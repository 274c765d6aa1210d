from datetime import datetime

from pydantic import AliasChoices, BaseModel, Field, field_validator


class Flight(BaseModel):
    """One recommended itinerary as returned by the recommendation model."""

    airline: str = ""
    flight_number: str = ""
    departure_city: str = ""
    arrival_city: str = ""
    departure_time: datetime | None = None
    arrival_time: datetime | None = None
    travel_class: str = Field("", alias="class")
    layover_count: int = 0
    total_duration: str = ""
    available_seats: int = 0
    recommendation_score: float = 0.0
    price: float = Field(0.0, validation_alias=AliasChoices("price", "estimated_price"))
    currency: str = "USD"

    model_config = {"populate_by_name": True, "frozen": True}

    # Model output uses null for unknown values; read it as the empty value
    @field_validator(
        "airline", "flight_number", "departure_city", "arrival_city", "travel_class", "total_duration",
        mode="before",
    )
    @classmethod
    def _null_text(cls, v):
        return "" if v is None else v

    @field_validator("layover_count", "available_seats", mode="before")
    @classmethod
    def _null_count(cls, v):
        return 0 if v is None else v

    @field_validator("recommendation_score", "price", mode="before")
    @classmethod
    def _null_amount(cls, v):
        return 0.0 if v is None else v

    @field_validator("currency", mode="before")
    @classmethod
    def _null_currency(cls, v):
        return "USD" if v is None else v


class FlightRecommendation(BaseModel):
    recommendations: list[Flight] = Field(default_factory=list)
    reasoning: str = ""

    @field_validator("recommendations", mode="before")
    @classmethod
    def _null_list(cls, v):
        return [] if v is None else v

    @field_validator("reasoning", mode="before")
    @classmethod
    def _null_reasoning(cls, v):
        return "" if v is None else v


class FlightRecommendationRequest(BaseModel):
    """Input of the recommendation stage, adapted from TravelParameters."""

    departure_city: str
    destination: str
    departure_date: datetime
    return_date: datetime
    preferred_class: str
    max_budget: float
    passengers: int
    additional_context: str = ""
