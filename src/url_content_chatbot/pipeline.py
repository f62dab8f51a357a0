"""
Ingestion pipeline: turns a URL into a ready, greeted conversational agent.
Each step is a LangGraph node delegating to a step method that can be tested on its own.
"""

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote
from langgraph.graph import StateGraph, START, END

from .config import Config
from .exceptions import (
    AgentCreationFailed, ChatbotError, GatewayError, IngestionFailed,
    RemoteOperationError, WorkflowBusyError, WorkflowStateError
)
from .gateway import GatewayClient, expect_field
from .models import AgentHandle, ContentObject, MessageRole, SummaryObject, WorkflowState
from .state import PipelineState, SessionContext
from .tracker import ResourceTracker


PIPELINE_ERROR_MESSAGE = "Sorry, I encountered an error processing that URL. Please try again."


class IngestionPipeline:
    """Runs submit → summarize → fetch summary → create agent → greet."""

    def __init__(self, gateway: GatewayClient, tracker: ResourceTracker, context: SessionContext,
                 config: Config, logger: logging.Logger):
        """Initialize the ingestion pipeline."""
        self.gateway = gateway
        self.tracker = tracker
        self.context = context
        self.config = config
        self.logger = logger

        self.workflow = self._build_workflow()

    def _build_workflow(self):
        """Build the LangGraph workflow."""
        workflow = StateGraph(PipelineState)

        workflow.add_node("submit", self._submit_node)
        workflow.add_node("summarize", self._summarize_node)
        workflow.add_node("fetch_summary", self._fetch_summary_node)
        workflow.add_node("create_agent", self._create_agent_node)
        workflow.add_node("greet", self._greet_node)
        workflow.add_node("handle_error", self._handle_error)

        workflow.add_edge(START, "submit")

        steps = ["submit", "summarize", "fetch_summary", "create_agent", "greet"]
        for step, next_step in zip(steps, steps[1:] + [END]):
            workflow.add_conditional_edges(
                step,
                self._step_router,
                {
                    "continue": next_step,
                    "error": "handle_error"
                }
            )

        workflow.add_edge("handle_error", END)

        return workflow.compile()

    # Steps

    async def submit(self, url: str) -> ContentObject:
        """Create the remote content object for ``url`` and track it."""
        name = self.config.pipeline.content_object_name
        try:
            response = await self.gateway.call("/input_data", {
                "created_object_name": name,
                "data_type": "urls",
                "input_data": [url]
            })
            expect_field(response)
        except (GatewayError, RemoteOperationError) as e:
            raise IngestionFailed(f"Failed to submit URL: {e.message}", step="submit", details=e.details) from e

        self.tracker.track(name)
        return ContentObject(name=name)

    async def summarize(self, content: ContentObject) -> SummaryObject:
        """Derive the summary object from the content object and track it."""
        pipeline = self.config.pipeline
        name = pipeline.summary_object_name
        try:
            response = await self.gateway.call("/apply_prompt", {
                "created_object_names": [name],
                "prompt_string": pipeline.summary_prompt.format(content_ref="{" + content.name + "}"),
                "inputs": [{
                    "input_object_name": content.name,
                    "mode": pipeline.input_mode
                }]
            })
            expect_field(response)
        except (GatewayError, RemoteOperationError) as e:
            raise IngestionFailed(f"Failed to summarize content: {e.message}", step="summarize", details=e.details) from e

        self.tracker.track(name)
        return SummaryObject(name=name)

    async def fetch_summary(self, summary: SummaryObject) -> str:
        try:
            response = await self.gateway.call(f"/return_data/{quote(summary.name, safe='')}", {}, "GET")
            text = expect_field(response, "text_value")
        except (GatewayError, RemoteOperationError) as e:
            raise IngestionFailed(f"Failed to fetch summary: {e.message}", step="fetch_summary", details=e.details) from e

        return str(text)

    async def create_agent(self, url: str, summary_text: str) -> AgentHandle:
        """Create an agent whose instructions embed the summary verbatim."""
        agent_config = self.config.agent
        try:
            response = await self.gateway.call("/create-agent", {
                "instructions": agent_config.instructions_template.format(url=url, summary=summary_text),
                "agent_name": agent_config.name
            })
            agent_id = expect_field(response, "agent_id")
        except (GatewayError, RemoteOperationError) as e:
            raise AgentCreationFailed(f"Failed to create agent: {e.message}", step="create_agent", details=e.details) from e

        return AgentHandle(agent_id=str(agent_id), name=agent_config.name)

    async def greet(self, agent: AgentHandle) -> str:
        try:
            response = await self.gateway.call("/chat", {
                "agent_id": agent.agent_id,
                "message": self.config.agent.greeting_prompt
            })
            greeting = expect_field(response, "response")
        except (GatewayError, RemoteOperationError) as e:
            raise AgentCreationFailed(f"Agent did not answer the greeting: {e.message}", step="greet", details=e.details) from e

        return str(greeting)

    # Graph nodes

    async def _submit_node(self, state: PipelineState) -> Dict[str, Any]:
        try:
            content = await self.submit(state.url)
            self.logger.info(f"Submitted {state.url} as '{content.name}'")
            return {"content": content.name}
        except IngestionFailed as e:
            return {"failure": e}

    async def _summarize_node(self, state: PipelineState) -> Dict[str, Any]:
        try:
            summary = await self.summarize(ContentObject(name=state.content))
            self.logger.info(f"Summary object '{summary.name}' created")
            return {"summary": summary.name}
        except IngestionFailed as e:
            return {"failure": e}

    async def _fetch_summary_node(self, state: PipelineState) -> Dict[str, Any]:
        try:
            text = await self.fetch_summary(SummaryObject(name=state.summary))
            self.logger.info(f"Fetched summary ({len(text)} characters)")
            return {"summary_text": text}
        except IngestionFailed as e:
            return {"failure": e}

    async def _create_agent_node(self, state: PipelineState) -> Dict[str, Any]:
        try:
            agent = await self.create_agent(state.url, state.summary_text)
            self.logger.info(f"Created agent {agent.agent_id}")
            return {"agent_id": agent.agent_id, "agent_name": agent.name}
        except AgentCreationFailed as e:
            return {"failure": e}

    async def _greet_node(self, state: PipelineState) -> Dict[str, Any]:
        try:
            greeting = await self.greet(AgentHandle(agent_id=state.agent_id, name=state.agent_name))
            return {"greeting": greeting}
        except AgentCreationFailed as e:
            return {"failure": e}

    async def _handle_error(self, state: PipelineState) -> Dict[str, Any]:
        failure = state.failure
        self.logger.error(f"Pipeline failed at step '{getattr(failure, 'step', 'unknown')}': {failure}")
        return {"failure": failure}

    def _step_router(self, state: PipelineState) -> str:
        return "error" if state.failure is not None else "continue"

    # Entry point

    async def run(self, url: str) -> Optional[AgentHandle]:
        """Run the whole pipeline for ``url``.

        Returns the agent handle on success. On failure the session moves to
        Failed with a single apology message; already tracked resources stay
        tracked for teardown and the failure is kept as ``context.last_error``.
        """
        if self.context.state == WorkflowState.PROCESSING:
            raise WorkflowBusyError("A URL is already being processed", error_code="busy")
        if self.context.state != WorkflowState.IDLE:
            raise WorkflowStateError(
                f"Cannot submit a URL while the session is {self.context.state.value}; tear it down first",
                error_code="invalid_state"
            )

        self.logger.info(f"Processing URL: {url}")
        self.context.begin(url)

        try:
            result = await self.workflow.ainvoke(PipelineState(url=url))
            failure = self._field(result, "failure")
        except Exception as e:
            self.logger.error(f"Unexpected error in ingestion pipeline: {str(e)}")
            failure = IngestionFailed(f"Unexpected error: {str(e)}", step="pipeline")

        if failure is not None:
            self._fail(failure)
            return None

        agent = AgentHandle(agent_id=self._field(result, "agent_id"), name=self._field(result, "agent_name"))
        self.context.agent = agent
        self.context.add_message(MessageRole.AGENT, self._field(result, "greeting"))
        self.context.state = WorkflowState.READY
        self.logger.info(f"Session ready with agent {agent.agent_id}")
        return agent

    def _fail(self, failure: ChatbotError) -> None:
        self.context.state = WorkflowState.FAILED
        self.context.last_error = failure
        self.context.add_message(MessageRole.AGENT, PIPELINE_ERROR_MESSAGE)

    @staticmethod
    def _field(result: Any, name: str) -> Any:
        if isinstance(result, dict):
            return result.get(name)
        return getattr(result, name, None)
