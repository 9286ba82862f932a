"""Per-step outcome records for branch automation."""

from dataclasses import dataclass, field

from .naming import BranchLocation, BranchSpec


@dataclass(frozen=True)
class StepResult:
    """Outcome of one best-effort step."""

    name: str
    ok: bool
    detail: str = ""

    @classmethod
    def success(cls, name: str, detail: str = "") -> "StepResult":
        return cls(name=name, ok=True, detail=detail)

    @classmethod
    def failure(cls, name: str, detail: str) -> "StepResult":
        return cls(name=name, ok=False, detail=detail)


@dataclass
class BranchReport:
    """All step outcomes of one branch automation run."""

    spec: BranchSpec | None
    location: BranchLocation
    steps: list[StepResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return bool(self.steps) and all(step.ok for step in self.steps)

    @property
    def failed_steps(self) -> list[StepResult]:
        return [step for step in self.steps if not step.ok]

    def add(self, step: StepResult) -> StepResult:
        self.steps.append(step)
        return step

    def summary(self) -> str:
        branch = self.spec.sanitized_name if self.spec else "-"
        parts = [
            f"{step.name}={'ok' if step.ok else 'failed'}" for step in self.steps
        ]
        return f"branch={branch} location={self.location.value} steps=[{', '.join(parts)}]"
