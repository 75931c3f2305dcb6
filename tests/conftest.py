"""
Pytest configuration and shared fixtures for Permit Setup tests.
"""

import tempfile
from pathlib import Path
from typing import Generator

import pytest

from permit_setup.admin import PolicyAdmin
from permit_setup.api.adapters.http import HttpAdapter
from permit_setup.api.client import PermitApiClient
from permit_setup.config.settings import PermitConfig
from tests.fakes import FakePermitApi, pdp_transport

API_URL = "https://api.test/v2"
PDP_URL = "http://pdp.test:7766"


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """
    Create a temporary directory for test files.

    Yields:
        Path to temporary directory that is cleaned up after test.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def permit_config() -> PermitConfig:
    return PermitConfig(
        api_url=API_URL,
        pdp_url=PDP_URL,
        api_key="permit_key_test_0123456789",
        project_id="proj",
        env_id="dev",
    )


@pytest.fixture
def fake_api() -> FakePermitApi:
    return FakePermitApi()


def make_client(config: PermitConfig, fake: FakePermitApi, pdp=None) -> PermitApiClient:
    return PermitApiClient(
        config,
        adapter=HttpAdapter(config.api_url, config.api_key, config.timeout, transport=fake.transport()),
        pdp_adapter=HttpAdapter(config.pdp_url, timeout=config.health_timeout, transport=pdp or pdp_transport()),
    )


@pytest.fixture
def client(permit_config: PermitConfig, fake_api: FakePermitApi) -> PermitApiClient:
    return make_client(permit_config, fake_api)


@pytest.fixture
def admin(permit_config: PermitConfig, client: PermitApiClient) -> PolicyAdmin:
    return PolicyAdmin(permit_config, client=client)


@pytest.fixture
def patch_transport(monkeypatch, fake_api: FakePermitApi):
    """
    Route every ``HttpAdapter`` built by the code under test to the fake.

    Used by tests that go through ``run_with_admin`` and the CLI, which
    construct their own clients.
    """
    real_init = HttpAdapter.__init__

    def init(self, base_url, api_key=None, timeout=30.0, transport=None):
        if transport is None:
            transport = fake_api.transport() if "api.test" in base_url else pdp_transport()
        real_init(self, base_url, api_key=api_key, timeout=timeout, transport=transport)

    monkeypatch.setattr(HttpAdapter, "__init__", init)
    return fake_api


@pytest.fixture
def permit_env(monkeypatch, temp_dir: Path) -> Path:
    """Environment for CLI runs; returns a config path that does not exist."""
    monkeypatch.setenv("PERMIT_API_URL", API_URL)
    monkeypatch.setenv("PERMIT_PDP_URL", PDP_URL)
    monkeypatch.setenv("PERMIT_API_KEY", "permit_key_test_0123456789")
    monkeypatch.setenv("PERMIT_PROJECT_ID", "proj")
    monkeypatch.setenv("PERMIT_ENV_ID", "dev")
    monkeypatch.setenv("PERMIT_LOG_LEVEL", "WARNING")
    monkeypatch.chdir(temp_dir)
    return temp_dir / "config.yaml"
