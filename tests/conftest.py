import pytest
from fastapi.testclient import TestClient

from storage_gateway.main import create_app

pytest_plugins = [
    "tests.fixtures.aws_fixtures",
    "tests.fixtures.backend_fixtures",
]


@pytest.fixture
def client(local_settings, local_backends) -> TestClient:
    with TestClient(create_app(settings=local_settings, backends=local_backends)) as test_client:
        yield test_client


@pytest.fixture
def aws_client(aws_settings, aws_backends) -> TestClient:
    with TestClient(create_app(settings=aws_settings, backends=aws_backends)) as test_client:
        yield test_client
