"""Abstract base class for the four reasoning stages."""

from abc import ABC, abstractmethod

from agents.prompts import compose_system_prompt
from core.state import PipelineContext


class StageAgent(ABC):
    """Base class that every stage agent must extend.

    A stage composes its prompts from the context, runs them through the
    executor (one reasoning call) and records the normalized output back
    into the context for the stages after it.
    """

    name = "base"
    description = "Base stage"

    @abstractmethod
    def user_message(self, context: PipelineContext) -> str:
        """Serialize the parts of the context this stage reads."""

    def system_prompt(self, context: PipelineContext) -> str:
        return compose_system_prompt(self.name, context.goal, context.followup)

    def run(self, context: PipelineContext, executor) -> PipelineContext:
        output = executor.execute(self.name, self.system_prompt(context), self.user_message(context))
        context.record(self.name, output)
        return context
