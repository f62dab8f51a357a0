"""
Main URL content chatbot system wiring gateway, pipeline, chat and teardown.
"""

from typing import Dict, Any, Optional

import httpx

from .chat import ChatSession
from .config import ConfigManager
from .exceptions import WorkflowBusyError
from .gateway import GatewayClient
from .logging_manager import LoggingManager
from .models import WorkflowState
from .pipeline import IngestionPipeline
from .state import SessionContext
from .teardown import TeardownController
from .tracker import ResourceTracker
from .validation import InputValidator


class URLContentChatbot:
    """Entry point used by presentation code."""

    def __init__(self, config_path: Optional[str] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        """Initialize the chatbot system."""
        self.config_manager = ConfigManager(config_path)
        self.config = self.config_manager.load_config()
        self.config_manager.validate_config(self.config)

        self.logging_manager = LoggingManager(self.config)
        self.logger = self.logging_manager.get_logger("system")
        get_logger = self.logging_manager.get_logger

        self.context = SessionContext()
        self.gateway = GatewayClient(self.config.gateway, get_logger("gateway"), transport=transport)
        self.tracker = ResourceTracker(self.gateway, get_logger("tracker"))
        self.validator = InputValidator(self.config, get_logger("validation"))

        self.pipeline = IngestionPipeline(self.gateway, self.tracker, self.context, self.config, get_logger("pipeline"))
        self.chat = ChatSession(self.gateway, self.context, get_logger("chat"))
        self.teardown_controller = TeardownController(self.tracker, self.context, get_logger("teardown"))

        self.logger.info("URL content chatbot initialized successfully")

    async def process_url(self, url: str) -> Dict[str, Any]:
        """Validate ``url``, release any previous session, and run the ingestion pipeline."""
        validation = self.validator.validate_url(url)
        if not validation.is_valid:
            return self._result(False, validation.error_message, error=validation.error_message)

        if self.context.state == WorkflowState.PROCESSING:
            error = "A URL is already being processed"
            return self._result(False, error, error=error)

        release_failures = []
        if self.context.state in (WorkflowState.READY, WorkflowState.FAILED):
            self.logger.info("Tearing down previous session before processing a new URL")
            release_failures = await self.teardown_controller.teardown()

        try:
            agent = await self.pipeline.run(validation.sanitized_input)
        except WorkflowBusyError as e:
            return self._result(False, e.message, error=e.message)

        metadata = {
            "url": validation.sanitized_input,
            "created_objects": list(self.tracker.names),
            "released_failures": [failure.resource_name for failure in release_failures]
        }

        if agent is None:
            error = self.context.last_error
            return self._result(
                False,
                self.context.messages[-1].text,
                error=error.message if error else None,
                metadata={**metadata, "failed_step": getattr(error, "step", None)}
            )

        return self._result(True, self.context.messages[0].text, metadata={**metadata, "agent_id": agent.agent_id})

    async def send_message(self, text: str) -> Dict[str, Any]:
        """Send a chat message to the current agent."""
        validation = self.validator.validate_message(text)
        if not validation.is_valid:
            return self._result(False, validation.error_message, error=validation.error_message)

        if not self.context.can_send:
            error = "Process a URL first to start chatting"
            return self._result(False, error, error=error)

        previous_error = self.context.last_error
        reply = await self.chat.send(validation.sanitized_input)
        if reply is None:
            error = "The session changed before the agent replied"
            return self._result(False, error, error=error)

        failure = self.context.last_error if self.context.last_error is not previous_error else None
        return self._result(failure is None, reply.text, error=failure.message if failure else None)

    async def delete_objects(self) -> Dict[str, Any]:
        """Release every created object and reset the session."""
        created = list(self.tracker.names)
        try:
            failures = await self.teardown_controller.teardown()
        except WorkflowBusyError as e:
            return self._result(False, e.message, error=e.message, metadata={"released": [], "failed": []})

        failed = [failure.resource_name for failure in failures]

        return self._result(
            not failures,
            f"Released {len(created) - len(failed)} of {len(created)} object(s)",
            error="; ".join(failure.message for failure in failures) or None,
            metadata={
                "released": [name for name in created if name not in failed],
                "failed": failed
            }
        )

    def get_debug_info(self) -> Dict[str, Any]:
        """Get created objects and the gateway call log."""
        return {
            "state": self.context.state.value,
            "agent_id": self.context.agent.agent_id if self.context.agent else None,
            "created_objects": list(self.tracker.names),
            "api_calls": [record.model_dump(mode="json") for record in self.gateway.call_log]
        }

    def get_system_info(self) -> Dict[str, Any]:
        """Get system information."""
        return {
            "agent": {
                "name": self.config.agent.name
            },
            "gateway": {
                "base_url": self.config.gateway.base_url,
                "timeout": self.config.gateway.timeout
            },
            "pipeline": {
                "content_object_name": self.config.pipeline.content_object_name,
                "summary_object_name": self.config.pipeline.summary_object_name
            },
            "logging": self.logging_manager.get_system_info()
        }

    async def aclose(self) -> None:
        await self.gateway.aclose()
        self.logging_manager.shutdown()

    def _result(self, success: bool, message: Optional[str], error: Optional[str] = None,
                metadata: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return {
            "success": success,
            "message": message,
            "state": self.context.state.value,
            "metadata": metadata or {},
            "error": error
        }
