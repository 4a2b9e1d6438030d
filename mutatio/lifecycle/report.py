"""Step bookkeeping for lifecycle runs.

``RunRecorder`` turns each port result into either the unwrapped value or a
``StepFailed`` naming the step, and remembers what ran. A finished run is
returned to the caller as an immutable ``LifecycleReport``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from mutatio.ci.export import export_file
from mutatio.core.failures import LifecycleError, StepFailed
from mutatio.core.result import Err, Ok, Result
from mutatio.lifecycle.context import PipelineContext
from mutatio.output.console import Style

__all__ = ["LifecycleReport", "RunRecorder"]


@dataclass(frozen=True, slots=True)
class LifecycleReport:
    steps: tuple[str, ...]
    skipped: tuple[str, ...]
    exported: tuple[tuple[str, str], ...]
    outputs: tuple[tuple[str, str], ...] = ()

    def output(self, key: str) -> str | None:
        for name, value in self.outputs:
            if name == key:
                return value
        return None

    def exported_value(self, name: str) -> str | None:
        for key, value in self.exported:
            if key == name:
                return value
        return None


class RunRecorder:
    def __init__(self, ctx: PipelineContext, title: str) -> None:
        self._ctx = ctx
        self._steps: list[str] = []
        self._skipped: list[str] = []
        self._exported: list[tuple[str, str]] = []
        self._outputs: list[tuple[str, str]] = []
        ctx.console.header(title)

    def step[T](self, name: str, result: Result[T, LifecycleError]) -> Result[T, StepFailed]:
        if isinstance(result, Err):
            return Err(StepFailed(step=name, cause=result.error))
        self._steps.append(name)
        self._ctx.console.print(name, Style.DIM)
        return Ok(result.value)

    def fail(self, name: str, cause: LifecycleError) -> Err[StepFailed]:
        return Err(StepFailed(step=name, cause=cause))

    def push(
        self, name: str, action: Callable[[], Result[str, LifecycleError]]
    ) -> Result[None, StepFailed]:
        """Run a push step, or record it as skipped when pushing is disabled."""
        if not self._ctx.push:
            self.skip(name, "push disabled")
            return Ok(None)
        pushed = self.step(name, action())
        if isinstance(pushed, Err):
            return pushed
        return Ok(None)

    def stage(self) -> Result[None, StepFailed]:
        """Stage the working tree, leaving out the file CI variables are written to."""
        target = export_file(self._ctx.exporter)
        return self.step("stage", self._ctx.vcs.stage_all(exclude=(target,) if target else ()))

    def skip(self, name: str, reason: str) -> None:
        self._skipped.append(name)
        self._ctx.console.warning(f"skipping {name} ({reason})")

    def export(self, name: str, value: str) -> Result[None, StepFailed]:
        exported = self.step(f"export {name}", self._ctx.exporter.export_variable(name, value))
        if isinstance(exported, Err):
            return exported
        self._exported.append((name, value))
        return Ok(None)

    def export_all(self, variables: list[tuple[str, str]]) -> Result[None, StepFailed]:
        for name, value in variables:
            exported = self.export(name, value)
            if isinstance(exported, Err):
                return exported
        return Ok(None)

    def note(self, key: str, value: object) -> None:
        self._outputs.append((key, str(value)))
        self._ctx.console.info(f"{key}: {value}")

    def finish(self, summary: str) -> LifecycleReport:
        self._ctx.console.success(summary)
        return LifecycleReport(
            steps=tuple(self._steps),
            skipped=tuple(self._skipped),
            exported=tuple(self._exported),
            outputs=tuple(self._outputs),
        )
