"""Tests for the extraction strategy pair (prompt rendering + decoding/validation)."""

import json
from datetime import datetime, timezone

import pytest

from app.schemas.booking import BookingRequest
from app.services.ai.travel_parameter_extraction import ExtractionDecodingStrategy, ExtractionPromptStrategy
from app.services.errors import InvalidDomainOutputError, MalformedOutputError
from payloads import travel_parameters_json


@pytest.fixture
def decoder(clock):
    return ExtractionDecodingStrategy(clock=clock)


class TestExtractionPrompt:
    def test_system_prompt_declares_shape(self):
        prompt = ExtractionPromptStrategy().get_system_prompt()
        for key in ("departure_city", "destination", "departure_date", "return_date", "budget_range"):
            assert f'"{key}"' in prompt

    def test_user_prompt_embeds_request(self, clock):
        req = BookingRequest(
            query="Book a flight from Cúcuta to Paris on March 10th for a 3-day trip",
            deadline=datetime(2025, 3, 5, 18, 0, tzinfo=timezone.utc),
        )
        prompt = ExtractionPromptStrategy(clock=clock).get_user_prompt(req)

        assert req.query in prompt
        assert "2025-03-05T18:00:00Z" in prompt
        assert "2025-03-01" in prompt


class TestExtractionDecoding:
    def test_valid_parameters(self, decoder):
        params = decoder.decode_response(travel_parameters_json())

        assert params.departure_city == "Cúcuta"
        assert params.destination == "Paris"
        assert params.departure_date == datetime(2025, 3, 10, tzinfo=timezone.utc)
        assert params.return_date == datetime(2025, 3, 13, tzinfo=timezone.utc)

    def test_preferences_parsed(self, decoder):
        content = travel_parameters_json(preferences={
            "budget_range": {"min": 300, "max": 1200},
            "travel_class": "business",
            "activities": ["museums"],
            "dietary_restrictions": ["vegetarian"],
        })
        prefs = decoder.decode_response(content).preferences

        assert prefs.budget_range.max == 1200
        assert prefs.travel_class == "business"
        assert prefs.activities == ["museums"]
        assert prefs.dietary_restrictions == ["vegetarian"]

    def test_null_preferences_normalised(self, decoder):
        content = travel_parameters_json(preferences={
            "budget_range": None,
            "travel_class": None,
            "activities": None,
            "dietary_restrictions": None,
        })
        prefs = decoder.decode_response(content).preferences

        assert prefs.budget_range.max is None
        assert prefs.travel_class == ""
        assert prefs.activities == []

    def test_code_fenced_output_accepted(self, decoder):
        content = "```json\n" + travel_parameters_json() + "\n```"
        assert decoder.decode_response(content).destination == "Paris"

    @pytest.mark.parametrize("content", ["not json", "{\"departure_city\": ", "", "[]"])
    def test_structural_failure(self, decoder, content):
        with pytest.raises(MalformedOutputError):
            decoder.decode_response(content)

    def test_wrong_field_type_is_structural(self, decoder):
        with pytest.raises(MalformedOutputError):
            decoder.decode_response(travel_parameters_json(departure_date="sometime soon"))

    def test_invalid_json_fails_before_semantic_checks(self, decoder):
        # Would also break every domain rule if it parsed
        content = '{"departure_city": "", "destination": "", "return_date": "2025-01-01T00:00:00Z",'
        with pytest.raises(MalformedOutputError):
            decoder.decode_response(content)

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"departure_city": ""}, "departure city is required"),
            ({"departure_city": None}, "departure city is required"),
            ({"destination": "  "}, "destination is required"),
            ({"departure_date": None}, "departure date is required"),
            ({"return_date": None}, "return date is required"),
            ({"departure_date": "2025-02-20T00:00:00Z"}, "departure date cannot be in the past"),
        ],
    )
    def test_domain_rules(self, decoder, overrides, message):
        with pytest.raises(InvalidDomainOutputError) as exc_info:
            decoder.decode_response(travel_parameters_json(**overrides))
        assert message in str(exc_info.value)

    def test_return_before_departure_rejected(self, decoder):
        content = travel_parameters_json(
            departure_date="2025-03-13T00:00:00Z",
            return_date="2025-03-10T00:00:00Z",
        )
        with pytest.raises(InvalidDomainOutputError) as exc_info:
            decoder.decode_response(content)
        assert "return date cannot be before departure date" in str(exc_info.value)

    def test_presence_checked_before_date_order(self, decoder):
        content = travel_parameters_json(
            destination="",
            departure_date="2025-03-13T00:00:00Z",
            return_date="2025-03-10T00:00:00Z",
        )
        with pytest.raises(InvalidDomainOutputError) as exc_info:
            decoder.decode_response(content)
        assert "destination is required" in str(exc_info.value)

    def test_departure_today_is_not_past(self, decoder):
        content = travel_parameters_json(
            departure_date="2025-03-01T00:00:00Z",
            return_date="2025-03-04T00:00:00Z",
        )
        assert decoder.decode_response(content).departure_date.day == 1

    def test_naive_dates_taken_as_utc(self, decoder):
        content = json.dumps({
            "departure_city": "Bogotá",
            "destination": "Madrid",
            "departure_date": "2025-04-01",
            "return_date": "2025-04-08T10:00:00",
        })
        params = decoder.decode_response(content)
        assert params.return_date.hour == 10
