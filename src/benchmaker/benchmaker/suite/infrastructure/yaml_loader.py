"""YamlSuiteLoader — reads a TestSuite from a YAML file."""

from pathlib import Path

import yaml
from pydantic import ValidationError

from benchmaker.suite.domain.observer import SuiteObserver
from benchmaker.suite.domain.suite import TestSuite
from benchmaker.suite.infrastructure.errors import SuiteLoadError


class YamlSuiteLoader:
    def __init__(self, observer: SuiteObserver) -> None:
        self._observer = observer

    def load(self, path: Path) -> TestSuite:
        """Parse and validate the suite at ``path``.

        Raises:
            SuiteLoadError: if the file is missing, is not YAML, or violates
                the suite schema (including duplicate test case ids).
        """
        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise SuiteLoadError(reason=f"file not found: {path}") from exc
        except yaml.YAMLError as exc:
            raise SuiteLoadError(reason=f"invalid YAML in {path}: {exc}") from exc

        try:
            suite = TestSuite.model_validate(raw)
        except ValidationError as exc:
            raise SuiteLoadError(reason=f"{path}: {exc}") from exc

        self._observer.suite_loaded(
            suite_id=suite.id,
            num_test_cases=len(suite.test_cases),
            path=str(path),
        )
        return suite
