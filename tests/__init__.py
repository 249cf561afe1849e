"""
Booking API Tests

Running Tests:
    # Unit and API tests (SQLite via aiosqlite, no external services)
    pytest -v

    # Booking service only
    pytest tests/unit/test_booking_service.py -v

    # Smoke tests against a running deployment
    BOOKING_API_URL=http://localhost:8000 pytest tests/e2e/smoke_test_e2e.py -v

Test Coverage:
    - Request parsing and required fields
    - Booking transaction (patient upsert, appointment, therapist notification)
    - Rollback on failure
    - Email transport and message building
    - WhatsApp payloads and phone normalization
    - Notification dispatch and failure isolation
    - HTTP status codes and error shapes
"""
