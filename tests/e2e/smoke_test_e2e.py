"""
E2E Smoke Tests for the TRG Nexus Booking API.

These tests call a running deployment over HTTP. A successful booking writes
real rows and may send real email and WhatsApp messages, so point them at a
staging database and use a test inbox.

Tests 5 scenarios:
1. Health check - verify service is up
2. Readiness - database reachable
3. Booking - full first-session booking
4. Validation - missing fields rejected
5. Method - non-POST rejected

Usage:
    BOOKING_API_URL=http://localhost:8000 pytest tests/e2e/smoke_test_e2e.py -v

Prerequisites:
    - Booking API running at BOOKING_API_URL
    - Database configured (trgnexus_POSTGRES_URL / POSTGRES_URL / DATABASE_URL)
"""

import os
import time
import uuid
from datetime import date, timedelta

import httpx
import pytest

# Configuration from environment
BOOKING_API_URL = os.getenv("BOOKING_API_URL", "")
TEST_EMAIL_DOMAIN = os.getenv("E2E_EMAIL_DOMAIN", "example.com")
TIMEOUT = float(os.getenv("E2E_TIMEOUT", "30"))

pytestmark = [
    pytest.mark.e2e,
    pytest.mark.skipif(not BOOKING_API_URL, reason="BOOKING_API_URL not configured"),
]


@pytest.fixture
def http():
    with httpx.Client(base_url=BOOKING_API_URL.rstrip("/"), timeout=TIMEOUT) as client:
        yield client


def booking_payload(**overrides) -> dict:
    """Valid booking for a unique throwaway patient."""
    payload = {
        "name": "Paciente Smoke Test",
        "email": f"smoke-{uuid.uuid4().hex[:8]}@{TEST_EMAIL_DOMAIN}",
        "date": (date.today() + timedelta(days=30)).isoformat(),
        "time": "10:00",
        "queixaPrincipal": "Teste automatizado",
    }
    payload.update(overrides)
    return payload


# =============================================================================
# Test 1: Health Check
# =============================================================================


class TestHealthCheck:
    """Verify the service is up and responding."""

    def test_health_endpoint(self, http):
        response = http.get("/health")

        assert response.status_code == 200
        assert response.json().get("status") == "healthy"

    def test_ready_endpoint(self, http):
        """Database must be reachable for bookings to work."""
        response = http.get("/health/ready")

        assert response.status_code == 200
        assert response.json()["checks"]["database"] == "ok"


# =============================================================================
# Test 2: Booking
# =============================================================================


class TestBooking:
    """Full booking against the real database."""

    def test_booking_confirmed(self, http):
        response = http.post("/api/booking", json=booking_payload())

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Booking confirmed"
        uuid.UUID(data["patientId"])
        assert data["emailDebug"]["status"] in ("sent", "skipped_no_credentials", "error")

    def test_rebooking_reuses_patient(self, http):
        payload = booking_payload()

        first = http.post("/api/booking", json=payload).json()
        second = http.post("/api/booking", json={**payload, "time": "15:00"}).json()

        assert first["patientId"] == second["patientId"]


# =============================================================================
# Test 3: Error Handling
# =============================================================================


class TestErrorHandling:
    """Rejections that never touch the database."""

    def test_missing_date_rejected(self, http):
        payload = booking_payload()
        del payload["date"]

        response = http.post("/api/booking", json=payload)

        assert response.status_code == 400
        assert response.json()["missing"] == ["date"]

    def test_get_not_allowed(self, http):
        response = http.get("/api/booking")

        assert response.status_code == 405
        assert response.json() == {"error": "Method not allowed"}


# =============================================================================
# Performance Smoke Test
# =============================================================================


class TestPerformance:
    """Basic performance sanity checks."""

    def test_booking_response_time_reasonable(self, http):
        """Booking includes SMTP round trips, so allow some slack."""
        start = time.time()
        response = http.post("/api/booking", json=booking_payload())
        elapsed = time.time() - start

        assert response.status_code == 200
        assert elapsed < 30, f"Booking took {elapsed:.1f}s, expected < 30s"


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
