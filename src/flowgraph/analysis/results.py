from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from flowgraph.schema import CheckResultDTO, SummaryDTO, VerificationReportDTO


class Status(str, Enum):
    PASS = "PASS"
    FAIL = "FAIL"
    WARN = "WARN"


class Category(str, Enum):
    STRUCTURAL = "structural"
    RELATIONAL = "relational"
    FLOW = "flow"
    INVARIANT = "invariant"


@dataclass(frozen=True)
class CheckResult:
    status: Status
    category: Category
    id: str
    message: str

    def as_dto(self) -> CheckResultDTO:
        return CheckResultDTO(
            status=self.status.value,
            category=self.category.value,
            id=self.id,
            message=self.message,
        )


@dataclass(frozen=True)
class Summary:
    passed: int = 0
    failed: int = 0
    warned: int = 0

    @property
    def total(self) -> int:
        return self.passed + self.failed + self.warned

    @classmethod
    def of(cls, results: Iterable[CheckResult]) -> Summary:
        counts = {status: 0 for status in Status}
        for result in results:
            counts[result.status] += 1
        return cls(
            passed=counts[Status.PASS],
            failed=counts[Status.FAIL],
            warned=counts[Status.WARN],
        )

    def as_dto(self) -> SummaryDTO:
        return SummaryDTO(
            passed=self.passed,
            failed=self.failed,
            warned=self.warned,
            total=self.total,
        )


class ResultLog:
    """Append-only record list shared by the verification phases of one run."""

    def __init__(self) -> None:
        self._results: list[CheckResult] = []

    def record(
        self, status: Status, category: Category, id: str, message: str
    ) -> CheckResult:
        result = CheckResult(status=status, category=category, id=id, message=message)
        self._results.append(result)
        return result

    def passed(self, category: Category, id: str, message: str) -> CheckResult:
        return self.record(Status.PASS, category, id, message)

    def failed(self, category: Category, id: str, message: str) -> CheckResult:
        return self.record(Status.FAIL, category, id, message)

    def warned(self, category: Category, id: str, message: str) -> CheckResult:
        return self.record(Status.WARN, category, id, message)

    @property
    def results(self) -> tuple[CheckResult, ...]:
        return tuple(self._results)

    def __len__(self) -> int:
        return len(self._results)


@dataclass(frozen=True)
class VerificationReport:
    name: str
    results: tuple[CheckResult, ...]
    version: str | None = None

    def for_category(self, category: Category) -> tuple[CheckResult, ...]:
        return tuple(result for result in self.results if result.category is category)

    def grouped(self) -> list[tuple[Category, tuple[CheckResult, ...]]]:
        groups = []
        for category in Category:
            members = self.for_category(category)
            if members:
                groups.append((category, members))
        return groups

    @property
    def summary(self) -> Summary:
        return Summary.of(self.results)

    @property
    def exit_code(self) -> int:
        return 1 if self.summary.failed else 0

    def as_dto(self) -> VerificationReportDTO:
        return VerificationReportDTO(
            name=self.name,
            version=self.version,
            results=[result.as_dto() for result in self.results],
            categories={
                category.value: Summary.of(members).as_dto()
                for category, members in self.grouped()
            },
            summary=self.summary.as_dto(),
            exit_code=self.exit_code,
        )
