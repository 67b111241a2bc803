"""Shared fixtures for unit and API tests."""

import pytest

from tests.fakes import FakeGitGateway


@pytest.fixture
def fake_gateway() -> FakeGitGateway:
    return FakeGitGateway()
