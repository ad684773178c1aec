"""Structlog implementation of the SuiteObserver port."""

import structlog


class StructlogSuiteObserver:
    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def suite_loaded(self, suite_id: str, num_test_cases: int, path: str) -> None:
        self._log.info(
            "suite.loaded",
            suite_id=suite_id,
            num_test_cases=num_test_cases,
            path=path,
        )
