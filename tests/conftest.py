"""
Shared fixtures: a scripted fake of the remote service served through httpx.MockTransport.
"""

import logging
from typing import Any, Dict, List, Tuple
from unittest.mock import Mock

import httpx
import pytest

from url_content_chatbot.config import Config, GatewayConfig
from url_content_chatbot.gateway import GatewayClient
from url_content_chatbot.state import SessionContext
from url_content_chatbot.tracker import ResourceTracker


BASE_URL = "https://api.test/api_tools"
PREFIX = "/api_tools"


class FakeService:
    """Answers requests from a table of (method, path) -> responses."""

    def __init__(self):
        self.routes: Dict[Tuple[str, str], List[Any]] = {}
        self.requests: List[httpx.Request] = []

    def on(self, method: str, path: str, *responses: Any) -> None:
        """Script responses for a route; the last one repeats.

        A response is a dict (JSON body), an ``httpx.Response``, an
        exception to raise from the transport, or a callable taking the
        request and returning the JSON body.
        """
        self.routes[(method, path)] = list(responses)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path[len(PREFIX):])
        scripted = self.routes.get(key)
        if not scripted:
            return httpx.Response(404, json={"error": f"no route for {key}"})

        response = scripted.pop(0) if len(scripted) > 1 else scripted[0]
        if isinstance(response, Exception):
            raise response
        if isinstance(response, httpx.Response):
            return response
        if callable(response):
            return httpx.Response(200, json=response(request))
        return httpx.Response(200, json=response)

    def paths(self) -> List[Tuple[str, str]]:
        return [(r.method, r.url.path[len(PREFIX):]) for r in self.requests]

    def script_happy_path(self, greeting: str = "Hi! This page is a short test page.") -> None:
        self.on("POST", "/input_data", {"created_object_name": "url_content"})
        self.on("POST", "/apply_prompt", {"created_object_names": ["url_summary"]})
        self.on("GET", "/return_data/url_summary", {"text_value": "A short test page."})
        self.on("POST", "/create-agent", {"agent_id": "a1"})
        self.on("POST", "/chat", {"response": greeting})
        self.on("DELETE", "/objects/url_content", {})
        self.on("DELETE", "/objects/url_summary", {})


@pytest.fixture
def service():
    return FakeService()


@pytest.fixture
def mock_logger():
    """Create a mock logger for testing."""
    return Mock(spec=logging.Logger)


@pytest.fixture
def gateway_config():
    return GatewayConfig(base_url=BASE_URL, api_key="test-key", app_id="test-app", timeout=5)


@pytest.fixture
def test_config(gateway_config, tmp_path):
    config = Config(gateway=gateway_config)
    config.logging.file = str(tmp_path / "logs" / "test.log")
    return config


@pytest.fixture
def gateway(gateway_config, mock_logger, service):
    return GatewayClient(gateway_config, mock_logger, transport=httpx.MockTransport(service.handler))


@pytest.fixture
def tracker(gateway, mock_logger):
    return ResourceTracker(gateway, mock_logger)


@pytest.fixture
def context():
    return SessionContext()


@pytest.fixture
def temp_config_file(tmp_path):
    """Create a temporary config file for testing."""
    config_content = f"""
gateway:
  base_url: "{BASE_URL}"
  api_key: "test-key"
  app_id: "test-app"
  timeout: 5

agent:
  name: "Test Assistant"

logging:
  level: "INFO"
  file: "{(tmp_path / 'logs' / 'test.log').as_posix()}"
"""
    path = tmp_path / "config.yaml"
    path.write_text(config_content, encoding="utf-8")
    return str(path)
