"""Observer port for test suite loading."""

from typing import Protocol


class SuiteObserver(Protocol):
    def suite_loaded(self, suite_id: str, num_test_cases: int, path: str) -> None: ...
