"""
Multi-step operations with compensating actions

Steps run in order. When one fails, the compensations of the steps that
already succeeded run in reverse order. The result tells the caller
whether everything went through, whether the partial work was undone, or
whether someone has to clean up by hand.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional
import structlog

logger = structlog.get_logger(__name__)


class SagaOutcome(str, Enum):
    COMPLETED = "completed"
    COMPENSATED = "compensated"
    MANUAL_CLEANUP = "manual_cleanup"


@dataclass
class SagaStep:
    name: str
    action: Callable[[Dict[str, Any]], Awaitable[Any]]
    compensation: Optional[Callable[[Dict[str, Any]], Awaitable[None]]] = None


@dataclass
class SagaResult:
    outcome: SagaOutcome
    context: Dict[str, Any] = field(default_factory=dict)
    failed_step: Optional[str] = None
    error: Optional[Exception] = None
    compensation_errors: Dict[str, Exception] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.outcome == SagaOutcome.COMPLETED


class Saga:
    """Ordered steps sharing a context dict; each step's return value is stored under its name"""

    def __init__(self, name: str):
        self.name = name
        self.steps: List[SagaStep] = []

    def step(self, name: str, action, compensation=None) -> "Saga":
        self.steps.append(SagaStep(name=name, action=action, compensation=compensation))
        return self

    async def run(self, context: Optional[Dict[str, Any]] = None) -> SagaResult:
        context = dict(context or {})
        done: List[SagaStep] = []

        for step in self.steps:
            try:
                context[step.name] = await step.action(context)
            except Exception as e:
                logger.warning("Saga step failed", saga=self.name, step=step.name, error=str(e))
                compensation_errors = await self._compensate(done, context)
                outcome = SagaOutcome.MANUAL_CLEANUP if compensation_errors else SagaOutcome.COMPENSATED
                if compensation_errors:
                    logger.error(
                        "Saga left partial state",
                        saga=self.name,
                        step=step.name,
                        compensations_failed=list(compensation_errors),
                    )
                return SagaResult(
                    outcome=outcome,
                    context=context,
                    failed_step=step.name,
                    error=e,
                    compensation_errors=compensation_errors,
                )
            done.append(step)

        logger.info("Saga completed", saga=self.name)
        return SagaResult(outcome=SagaOutcome.COMPLETED, context=context)

    async def _compensate(self, done: List[SagaStep], context: Dict[str, Any]) -> Dict[str, Exception]:
        errors: Dict[str, Exception] = {}
        for step in reversed(done):
            if step.compensation is None:
                continue
            try:
                await step.compensation(context)
                logger.info("Saga step compensated", saga=self.name, step=step.name)
            except Exception as e:
                logger.error("Saga compensation failed", saga=self.name, step=step.name, error=str(e))
                errors[step.name] = e
        return errors
