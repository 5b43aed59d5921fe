"""
tests/integration/
~~~~~~~~~~~~~~~~~~
Integration tests that call the live cabinet locator.

These tests are SKIPPED by default. To run them:

    INTEGRATION_TESTS=1 pytest tests/integration/ -v

Keep request frequency low; the locator is a public site, not an API.
"""
