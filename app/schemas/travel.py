from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class BudgetRange(BaseModel):
    min: float | None = None
    max: float | None = None


class Preferences(BaseModel):
    budget_range: BudgetRange = Field(default_factory=BudgetRange)
    travel_class: str = ""
    activities: list[str] = Field(default_factory=list)
    dietary_restrictions: list[str] = Field(default_factory=list)

    @field_validator("budget_range", mode="before")
    @classmethod
    def _null_budget(cls, v):
        return {} if v is None else v

    @field_validator("travel_class", mode="before")
    @classmethod
    def _null_class(cls, v):
        return "" if v is None else v

    @field_validator("activities", "dietary_restrictions", mode="before")
    @classmethod
    def _null_list(cls, v):
        return [] if v is None else v


class TravelParameters(BaseModel):
    """Structured trip parameters extracted from a natural-language request."""

    departure_city: str = ""
    destination: str = ""
    departure_date: datetime | None = None
    return_date: datetime | None = None
    preferences: Preferences = Field(default_factory=Preferences)

    @field_validator("departure_city", "destination", mode="before")
    @classmethod
    def _null_city(cls, v):
        return "" if v is None else v

    @field_validator("preferences", mode="before")
    @classmethod
    def _null_preferences(cls, v):
        return {} if v is None else v
