"""
Test Suite

Service, engine, poller and API tests for the lexdesk backend. Every test
runs against an in-memory mongomock database (see conftest.py).

To run tests (from the repository root):
    pytest
    pytest backend/tests/test_reminder_poller.py
"""
