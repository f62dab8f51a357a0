"""
Custom exceptions for the URL content chatbot.
Provides specific error types for the gateway, the ingestion workflow and teardown.
"""

from typing import Optional, Dict, Any


class ChatbotError(Exception):
    """Base exception for all chatbot errors."""

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        """Initialize the exception."""
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class GatewayError(ChatbotError):
    """Raised when a call to the remote service cannot be completed."""

    def __init__(self, message: str, endpoint: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        """Initialize the gateway error."""
        super().__init__(message, error_code, details)
        self.endpoint = endpoint


class TransportError(GatewayError):
    """Raised on connection failures and timeouts."""
    pass


class ParseError(GatewayError):
    """Raised when the response body is not valid JSON."""
    pass


class RemoteOperationError(ChatbotError):
    """Raised when the remote service answers with an error or an incomplete payload."""
    pass


class WorkflowStateError(ChatbotError):
    """Raised when an operation is not allowed in the current workflow state."""
    pass


class WorkflowBusyError(WorkflowStateError):
    """Raised when a URL is submitted while another one is still processing."""
    pass


class IngestionFailed(ChatbotError):
    """Raised when submitting, summarizing or fetching the summary fails."""

    def __init__(self, message: str, step: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        """Initialize the ingestion error."""
        super().__init__(message, error_code, details)
        self.step = step


class AgentCreationFailed(ChatbotError):
    """Raised when the agent cannot be created or does not answer the greeting."""

    def __init__(self, message: str, step: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        """Initialize the agent creation error."""
        super().__init__(message, error_code, details)
        self.step = step


class ChatTurnFailed(ChatbotError):
    """Raised when a chat round trip fails."""
    pass


class ReleaseFailed(ChatbotError):
    """Raised when a tracked resource cannot be deleted."""

    def __init__(self, message: str, resource_name: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        """Initialize the release error."""
        super().__init__(message, error_code, details)
        self.resource_name = resource_name
