"""
Test the teardown controller for the URL content chatbot.
"""

import asyncio

import httpx
import pytest

from url_content_chatbot.exceptions import ReleaseFailed, WorkflowBusyError
from url_content_chatbot.gateway import GatewayClient
from url_content_chatbot.models import AgentHandle, MessageRole, WorkflowState
from url_content_chatbot.pipeline import IngestionPipeline
from url_content_chatbot.teardown import TeardownController
from url_content_chatbot.tracker import ResourceTracker


@pytest.fixture
def controller(tracker, context, mock_logger):
    return TeardownController(tracker, context, mock_logger)


@pytest.fixture
def ready_session(context, tracker):
    context.state = WorkflowState.READY
    context.url = "https://example.com"
    context.agent = AgentHandle(agent_id="a1", name="Website Content Assistant")
    context.add_message(MessageRole.AGENT, "Hi!")
    tracker.track("url_content")
    tracker.track("url_summary")
    return context


class TestTeardownController:
    """Test teardown functionality."""

    @pytest.mark.asyncio
    async def test_teardown_releases_and_resets(self, controller, ready_session, tracker, service):
        service.script_happy_path()

        failures = await controller.teardown()

        assert failures == []
        assert service.paths() == [
            ("DELETE", "/objects/url_content"),
            ("DELETE", "/objects/url_summary"),
        ]
        assert len(tracker) == 0
        assert ready_session.state == WorkflowState.IDLE
        assert ready_session.agent is None
        assert ready_session.messages == []
        assert ready_session.url is None

    @pytest.mark.asyncio
    async def test_partial_release_failure(self, controller, ready_session, tracker, service, mock_logger):
        service.on("DELETE", "/objects/url_content", {})
        service.on("DELETE", "/objects/url_summary", httpx.ConnectError("network down"))

        failures = await controller.teardown()

        assert len(service.requests) == 2
        assert [f.resource_name for f in failures] == ["url_summary"]
        assert all(isinstance(f, ReleaseFailed) for f in failures)
        assert ready_session.state == WorkflowState.IDLE
        assert len(tracker) == 0
        release_errors = [
            call for call in mock_logger.error.call_args_list
            if "Failed to release" in call.args[0]
        ]
        assert len(release_errors) == 1

    @pytest.mark.asyncio
    async def test_teardown_is_idempotent(self, controller, ready_session, service):
        service.script_happy_path()

        await controller.teardown()
        calls_after_first = len(service.requests)
        failures = await controller.teardown()

        assert failures == []
        assert len(service.requests) == calls_after_first
        assert ready_session.state == WorkflowState.IDLE

    @pytest.mark.asyncio
    async def test_teardown_of_failed_session(self, controller, context, tracker, service):
        service.script_happy_path()
        context.state = WorkflowState.FAILED
        context.add_message(MessageRole.AGENT, "Sorry")
        tracker.track("url_content")

        await controller.teardown()

        assert service.paths() == [("DELETE", "/objects/url_content")]
        assert context.state == WorkflowState.IDLE
        assert context.messages == []
        assert context.last_error is None

    @pytest.mark.asyncio
    async def test_rejects_teardown_while_processing(self, controller, context, tracker, service):
        context.state = WorkflowState.PROCESSING
        tracker.track("url_content")

        with pytest.raises(WorkflowBusyError):
            await controller.teardown()

        assert service.requests == []
        assert tracker.names == ("url_content",)
        assert context.state == WorkflowState.PROCESSING

    @pytest.mark.asyncio
    async def test_teardown_during_running_pipeline_leaves_it_intact(
        self, gateway_config, test_config, context, service, mock_logger
    ):
        service.script_happy_path()
        summarizing = asyncio.Event()
        resume = asyncio.Event()

        async def handler(request):
            if request.url.path.endswith("/apply_prompt"):
                summarizing.set()
                await resume.wait()
            return service.handler(request)

        gateway = GatewayClient(gateway_config, mock_logger, transport=httpx.MockTransport(handler))
        tracker = ResourceTracker(gateway, mock_logger)
        pipeline = IngestionPipeline(gateway, tracker, context, test_config, mock_logger)
        controller = TeardownController(tracker, context, mock_logger)

        run = asyncio.create_task(pipeline.run("https://example.com"))
        await summarizing.wait()

        with pytest.raises(WorkflowBusyError):
            await controller.teardown()
        resume.set()
        agent = await run

        assert agent is not None
        assert context.state == WorkflowState.READY
        assert tracker.names == ("url_content", "url_summary")
        assert not any(method == "DELETE" for method, _ in service.paths())
