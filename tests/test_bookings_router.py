"""HTTP tests for the bookings API."""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.routers.bookings import get_booking_service
from app.schemas.booking import BookingResponse, BookingStatus
from app.schemas.flight import Flight
from app.services.errors import (
    DeadlineExceededError,
    ExtractionFailedError,
    InvalidDomainOutputError,
    ProviderError,
    RecommendationFailedError,
)
from payloads import flight_dict


class StubBookingService:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    async def process_booking(self, req, *, timeout=None):
        self.calls.append(req)
        if self.error is not None:
            raise self.error
        now = datetime.now(timezone.utc)
        return BookingResponse(
            id=str(uuid.uuid4()),
            status=BookingStatus.PROCESSING,
            query=req.query,
            deadline=req.deadline,
            flight=Flight.model_validate(flight_dict()),
            message="Searching for flights to Paris",
            created_at=now,
            updated_at=now,
        )


@pytest.fixture
def stub_service():
    return StubBookingService()


@pytest.fixture
def client(stub_service):
    app.dependency_overrides[get_booking_service] = lambda: stub_service
    yield TestClient(app)
    app.dependency_overrides.clear()


def future_deadline() -> str:
    return (datetime.now(timezone.utc) + timedelta(days=2)).isoformat()


def post_booking(client, query="Fly me from Cúcuta to Paris next week", deadline=None):
    return client.post("/api/v1/bookings", json={"query": query, "deadline": deadline or future_deadline()})


class TestCreateBooking:
    def test_success(self, client, stub_service):
        resp = post_booking(client)

        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "processing"
        assert body["message"] == "Searching for flights to Paris"
        assert body["flight"]["class"] == "economy"
        assert body["flight"]["price"] == 850
        assert len(stub_service.calls) == 1

    def test_empty_query(self, client, stub_service):
        resp = post_booking(client, query="  ")

        assert resp.status_code == 400
        assert resp.json() == {"error": "query cannot be empty"}
        assert stub_service.calls == []

    def test_past_deadline(self, client, stub_service):
        past = (datetime.now(timezone.utc) - timedelta(hours=1)).isoformat()

        resp = post_booking(client, deadline=past)

        assert resp.status_code == 400
        assert resp.json() == {"error": "deadline cannot be in the past"}
        assert stub_service.calls == []

    @pytest.mark.parametrize(
        "deadline",
        ["next tuesday", 4102444800, "2100-01-01", "2100-01-01T12:00:00", "2100-01-01 12:00:00Z"],
    )
    def test_deadline_must_be_rfc3339(self, client, stub_service, deadline):
        resp = post_booking(client, deadline=deadline)

        assert resp.status_code == 400
        assert resp.json()["error"] == "Invalid request body"
        assert stub_service.calls == []

    def test_rfc3339_offset_deadline(self, client, stub_service):
        resp = post_booking(client, deadline="2100-01-01T12:00:00+05:00")

        assert resp.status_code == 200
        assert len(stub_service.calls) == 1

    def test_missing_field(self, client):
        resp = client.post("/api/v1/bookings", json={"query": "Paris"})

        assert resp.status_code == 400

    @pytest.mark.parametrize(
        "error, status",
        [
            (ExtractionFailedError(InvalidDomainOutputError("invalid travel parameters: destination is required")), 400),
            (RecommendationFailedError(ProviderError("AI provider error: overloaded", 503)), 500),
            (ExtractionFailedError(DeadlineExceededError("AI provider request timed out")), 504),
        ],
    )
    def test_pipeline_errors(self, client, stub_service, error, status):
        stub_service.error = error

        resp = post_booking(client)

        assert resp.status_code == status
        assert resp.json() == {"error": str(error)}


class TestBookingStatus:
    def test_known_id(self, client):
        booking_id = str(uuid.uuid4())

        resp = client.get("/api/v1/bookings/status", params={"id": booking_id})

        assert resp.status_code == 200
        assert resp.json() == {"id": booking_id, "status": "processing"}

    def test_missing_id(self, client):
        resp = client.get("/api/v1/bookings/status")

        assert resp.status_code == 400
        assert resp.json() == {"error": "Booking ID is required"}

    def test_malformed_id(self, client):
        resp = client.get("/api/v1/bookings/status", params={"id": "abc"})

        assert resp.status_code == 400


def test_health(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "OK"}
