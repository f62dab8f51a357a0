"""
Common data models used across the URL content chatbot.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class WorkflowState(str, Enum):
    """Whether a URL may be submitted or a chat message sent."""
    IDLE = "idle"
    PROCESSING = "processing"
    READY = "ready"
    FAILED = "failed"


class MessageRole(str, Enum):
    USER = "user"
    AGENT = "agent"


class Message(BaseModel):
    """A single chat message."""
    role: MessageRole
    text: str
    created_at: datetime = Field(default_factory=utc_now)


class ContentObject(BaseModel):
    """Remote content object created from the submitted URL."""
    name: str


class SummaryObject(BaseModel):
    """Remote summary object derived from a content object."""
    name: str


class AgentHandle(BaseModel):
    """Conversational agent created for the current session."""
    agent_id: str
    name: str


class GatewayCallRecord(BaseModel):
    """Diagnostic record of a single gateway call."""
    timestamp: datetime = Field(default_factory=utc_now)
    endpoint: str
    method: str
    request: Any = None
    response: Any = None
    status_code: Optional[int] = None
    error: Optional[str] = None
