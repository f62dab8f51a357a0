"""
Teardown of a chat session and the remote objects it created.
"""

import logging
from typing import List

from .exceptions import ReleaseFailed, WorkflowBusyError
from .models import WorkflowState
from .state import SessionContext
from .tracker import ResourceTracker


class TeardownController:
    """Releases tracked resources and returns the session to Idle."""

    def __init__(self, tracker: ResourceTracker, context: SessionContext, logger: logging.Logger):
        """Initialize the teardown controller."""
        self.tracker = tracker
        self.context = context
        self.logger = logger

    async def teardown(self) -> List[ReleaseFailed]:
        """Release everything tracked and reset the session.

        Returns the deletions that failed; the state is reset to Idle
        regardless. With nothing tracked no calls are made. Raises
        ``WorkflowBusyError`` while a URL is still being processed, since
        the running pipeline still depends on the tracked objects.
        """
        if self.context.state == WorkflowState.PROCESSING:
            raise WorkflowBusyError("Cannot tear down while a URL is being processed", error_code="busy")

        failures: List[ReleaseFailed] = []
        if len(self.tracker):
            self.logger.info(f"Releasing {len(self.tracker)} tracked resource(s)")
            failures = await self.tracker.release_all()

        self.tracker.clear()
        self.context.reset()

        if failures:
            self.logger.warning(f"Teardown finished with {len(failures)} unreleased resource(s)")
        else:
            self.logger.info("Teardown complete")
        return failures
