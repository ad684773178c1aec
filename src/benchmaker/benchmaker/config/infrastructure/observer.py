"""Structlog implementation of the ConfigObserver port."""

import structlog


class StructlogConfigObserver:
    """Delegates config domain events to structlog.

    Satisfies the ConfigObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def config_loaded(self, name: str, num_models: int) -> None:
        self._log.info("config.loaded", name=name, num_models=num_models)

    def config_judge_temperature_warning(self, temperature: float) -> None:
        self._log.warning(
            "config.judge_temperature_warning",
            temperature=temperature,
            message="Judge temperature above 0.2 makes llm-judge scores noisy",
        )

    def config_judge_missing_warning(self) -> None:
        self._log.warning(
            "config.judge_missing_warning",
            message="No judge configured; llm-judge test cases fall back to boolean scoring",
        )
