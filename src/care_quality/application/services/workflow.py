"""Step recording for multi-step, side-effecting workflows.

Steps are not atomic as a group: when step N fails, whatever steps before it
wrote stays written. The recorder keeps an ordered account of which steps
succeeded so callers can report partial outcomes.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import structlog

from care_quality.application.dtos import StepOutcome

T = TypeVar("T")

logger = structlog.get_logger(__name__)


class WorkflowRecorder:
    """Runs workflow steps and records each outcome."""

    def __init__(self, workflow: str, **context: Any) -> None:
        self.workflow = workflow
        self.steps: list[StepOutcome] = []
        self._logger = logger.bind(workflow=workflow, **context)

    async def run(self, name: str, operation: Callable[[], Awaitable[T]], required: bool = False) -> T | None:
        """Run one step.

        Args:
            name: Step name for the record
            operation: Zero-argument coroutine function performing the step
            required: Re-raise the failure instead of recording and continuing

        Returns:
            The step's result, or None if a non-required step failed.
        """
        try:
            result = await operation()
        except Exception as e:
            self.steps.append(StepOutcome(name=name, success=False, error=str(e), error_type=type(e).__name__))
            self._logger.error("Workflow step failed", step=name, required=required, error=str(e), exc_info=True)
            if required:
                raise
            return None

        self.steps.append(StepOutcome(name=name, success=True))
        self._logger.debug("Workflow step completed", step=name)
        return result

    @property
    def failed_steps(self) -> list[str]:
        return [step.name for step in self.steps if not step.success]
