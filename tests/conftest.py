import os

import pytest

os.environ["APP_ENV"] = "testing"

from src.operations_hub.operations_hub.main import create_app  # noqa: E402
from tests.fakes import FakeAssetStore, build_fake_container  # noqa: E402


@pytest.fixture
def asset_store():
    return FakeAssetStore(failing=("broken.pdf",))


@pytest.fixture
def container(asset_store):
    return build_fake_container(asset_store)


@pytest.fixture
def app(container):
    app = create_app(container)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()
