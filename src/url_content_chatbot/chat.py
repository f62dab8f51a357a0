"""
Chat session with the agent created by the ingestion pipeline.
"""

import logging
from typing import Optional

from .exceptions import ChatTurnFailed, GatewayError, RemoteOperationError
from .gateway import GatewayClient, expect_field
from .models import Message, MessageRole
from .state import SessionContext


CHAT_ERROR_MESSAGE = "Sorry, I encountered an error. Please try again."


class ChatSession:
    """Exchanges messages with the current agent while the session is ready."""

    def __init__(self, gateway: GatewayClient, context: SessionContext, logger: logging.Logger):
        """Initialize the chat session."""
        self.gateway = gateway
        self.context = context
        self.logger = logger

    async def send(self, text: str) -> Optional[Message]:
        """Send one user message and return the agent's reply message.

        Does nothing and returns None unless the session is ready. The user
        message is appended before the round trip; a failed round trip appends
        an apology instead of a reply and leaves the workflow state alone.
        Callers must not overlap ``send`` calls.
        """
        if not self.context.can_send:
            self.logger.debug("Ignoring message: chat is not ready")
            return None

        if not text or not text.strip():
            return None

        agent = self.context.agent
        self.context.add_message(MessageRole.USER, text)

        try:
            response = await self.gateway.call("/chat", {
                "agent_id": agent.agent_id,
                "message": text
            })
            reply = expect_field(response, "response")
        except (GatewayError, RemoteOperationError) as e:
            failure = ChatTurnFailed(f"Chat turn failed: {e.message}", error_code=e.error_code, details=e.details)
            self.logger.error(failure.message)
            if self.context.agent is not agent:
                return None
            self.context.last_error = failure
            return self.context.add_message(MessageRole.AGENT, CHAT_ERROR_MESSAGE)

        if self.context.agent is not agent:
            self.logger.warning(f"Discarding reply from superseded agent {agent.agent_id}")
            return None

        return self.context.add_message(MessageRole.AGENT, str(reply))
