"""
Pytest configuration and fixtures for scwprovider tests.
"""

from unittest.mock import Mock

import pytest

from scwprovider.api import AppleSiliconAPI, ContainerAPI, DocumentDBAPI, InferenceAPI
from scwprovider.settings import reload_settings

REGION = "fr-par"
ZONE = "fr-par-3"
PROJECT_ID = "11111111-1111-1111-1111-111111111111"


@pytest.fixture(autouse=True)
def settings(monkeypatch):
    """Deterministic settings: default locality, project and no polling delay."""
    for name in ("SCW_ACCESS_KEY", "SCW_SECRET_KEY", "SCW_API_URL", "SCW_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("SCW_DEFAULT_REGION", REGION)
    monkeypatch.setenv("SCW_DEFAULT_ZONE", "fr-par-1")
    monkeypatch.setenv("SCW_DEFAULT_PROJECT_ID", PROJECT_ID)
    monkeypatch.setenv("SCW_POLL_INTERVAL", "0")
    return reload_settings()


@pytest.fixture
def container_api():
    return Mock(spec=ContainerAPI)


@pytest.fixture
def documentdb_api():
    return Mock(spec=DocumentDBAPI)


@pytest.fixture
def inference_api():
    return Mock(spec=InferenceAPI)


@pytest.fixture
def applesilicon_api():
    return Mock(spec=AppleSiliconAPI)
