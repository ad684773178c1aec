"""TestSuite — the read-only input of a benchmark run."""

from pydantic import BaseModel, Field, field_validator

from benchmaker.suite.domain.test_case import TestCase


class TestSuite(BaseModel, frozen=True):
    __test__ = False  # not a pytest class

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    description: str | None = None
    system_prompt: str = ""
    judge_system_prompt: str | None = None
    test_cases: list[TestCase] = Field(min_length=1)

    @field_validator("test_cases")
    @classmethod
    def _ids_unique(cls, test_cases: list[TestCase]) -> list[TestCase]:
        seen: set[str] = set()
        for case in test_cases:
            if case.id in seen:
                raise ValueError(f"duplicate test case id: {case.id}")
            seen.add(case.id)
        return test_cases
