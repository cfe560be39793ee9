"""
Unit Test Configuration
=======================
Fixtures for pure logic tests - NO NETWORK ALLOWED.

HTTP goes through httpx.MockTransport or the fakes in tests/mocks.
"""

import pytest


# ============================================================================
# AUTOUSE: ENFORCE I/O ISOLATION
# ============================================================================


@pytest.fixture(autouse=True)
def isolate_unit_tests(monkeypatch):
    """
    Any test that accidentally reaches a real socket fails loudly.
    httpx.MockTransport is a different transport class and keeps working.
    """
    def block_network(*args, **kwargs):
        raise RuntimeError(
            "Network I/O detected in unit test! "
            "Use httpx.MockTransport or tests.mocks fakes instead."
        )

    monkeypatch.setattr("httpx.AsyncHTTPTransport.handle_async_request", block_network)
    monkeypatch.setattr("httpx.HTTPTransport.handle_request", block_network)
