from unittest import mock

import pytest

from app import create_app
from config import Settings


class FakeResponse:
    """requests.Response 的最小替身"""

    def __init__(self, status_code=200, json_data=None, text="", reason="OK"):
        self.status_code = status_code
        self._json_data = json_data
        self.text = text
        self.reason = reason

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._json_data is None:
            raise ValueError("No JSON object could be decoded")
        return self._json_data


@pytest.fixture
def fake_response():
    return FakeResponse


@pytest.fixture
def settings():
    return Settings(google_api_key="server-key", model_name="gemini-test", request_timeout=5)


@pytest.fixture
def client(settings):
    app = create_app(settings)
    app.config["TESTING"] = True
    return app.test_client()


@pytest.fixture
def keyless_client():
    app = create_app(Settings(google_api_key=None))
    app.config["TESTING"] = True
    return app.test_client()


@pytest.fixture
def mock_generate():
    with mock.patch("gemini_client.generate_content") as generate:
        yield generate
