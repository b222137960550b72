"""
Minimal saga runner for multi-step writes against the hosted backend.

There is no transaction spanning the table API and object storage, so each
step is paired with a compensating action. The runner keeps an ordered log of
completed steps; the caller decides which of them to compensate when a later
step fails.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

# Receives the result of the step it undoes
Compensation = Callable[[Any], Awaitable[Any]]


@dataclass
class SagaStep:
    name: str
    result: Any = None
    compensation: Compensation | None = None
    compensated: bool = False


class Saga:
    def __init__(self, name: str):
        self.name = name
        self.completed: List[SagaStep] = []

    async def run(
        self,
        step_name: str,
        action: Callable[[], Awaitable[Any]],
        compensation: Compensation | None = None,
    ) -> Any:
        """
        Execute one step. On success the step is appended to the log together
        with its compensation; on failure the exception propagates and nothing
        is logged.
        """
        result = await action()
        self.completed.append(SagaStep(step_name, result, compensation))
        logger.debug(f"[{self.name}] step completed: {step_name}")
        return result

    def step(self, step_name: str) -> SagaStep | None:
        return next((s for s in self.completed if s.name == step_name), None)

    async def compensate(self, *step_names: str) -> List[str]:
        """
        Run the compensations of the named steps, in the order given.

        Best-effort: a failing compensation is logged and the remaining ones
        still run. Returns the names of the steps that were compensated.
        """
        compensated = []
        for step_name in step_names:
            step = self.step(step_name)
            if step is None or step.compensation is None or step.compensated:
                continue
            try:
                await step.compensation(step.result)
                step.compensated = True
                compensated.append(step_name)
                logger.info(f"[{self.name}] compensated step: {step_name}")
            except Exception as e:
                logger.error(
                    f"[{self.name}] compensation failed for {step_name}: {type(e).__name__}: {e}"
                )
        return compensated
