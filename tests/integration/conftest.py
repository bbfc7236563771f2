"""Shared fixtures for integration tests.

These tests call the live openFDA API. They are skipped unless
OPENFDA_INTEGRATION=1 is set; OPENFDA_API_KEY raises the rate limit.
"""

import os

import pytest

from drug_safety_mcp.data_sources.fda import OpenFDAClient
from drug_safety_mcp.tools.dispatcher import ToolDispatcher


def pytest_collection_modifyitems(config, items):
    if os.environ.get("OPENFDA_INTEGRATION") == "1":
        return
    skip = pytest.mark.skip(reason="OPENFDA_INTEGRATION not set")
    for item in items:
        if "integration" in item.nodeid:
            item.add_marker(skip)


@pytest.fixture
async def fda_client():
    """Create and tear down an OpenFDAClient."""
    c = OpenFDAClient()
    yield c
    await c.close()


@pytest.fixture
async def live_dispatcher(fda_client):
    return ToolDispatcher(fda_client)
