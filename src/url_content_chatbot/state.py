"""
State models for the URL content chatbot workflow.
"""

from typing import Optional, List
from pydantic import BaseModel

from .exceptions import ChatbotError
from .models import AgentHandle, Message, MessageRole, WorkflowState


class SessionContext(BaseModel):
    """Workflow state shared by the pipeline, the chat session and teardown."""
    state: WorkflowState = WorkflowState.IDLE
    url: Optional[str] = None
    agent: Optional[AgentHandle] = None
    messages: List[Message] = []
    last_error: Optional[ChatbotError] = None

    class Config:
        arbitrary_types_allowed = True

    @property
    def can_send(self) -> bool:
        return self.state == WorkflowState.READY and self.agent is not None

    def add_message(self, role: MessageRole, text: str) -> Message:
        message = Message(role=role, text=text)
        self.messages.append(message)
        return message

    def begin(self, url: str) -> None:
        """Enter Processing for a freshly submitted URL."""
        self.state = WorkflowState.PROCESSING
        self.url = url
        self.agent = None
        self.messages.clear()
        self.last_error = None

    def reset(self) -> None:
        """Return to Idle with no agent and an empty conversation."""
        self.state = WorkflowState.IDLE
        self.url = None
        self.agent = None
        self.messages.clear()
        self.last_error = None


class PipelineState(BaseModel):
    """State carried between the ingestion graph nodes."""
    url: str
    content: Optional[str] = None
    summary: Optional[str] = None
    summary_text: Optional[str] = None
    agent_id: Optional[str] = None
    agent_name: Optional[str] = None
    greeting: Optional[str] = None
    failure: Optional[ChatbotError] = None

    class Config:
        arbitrary_types_allowed = True
