"""Shared test fixtures for docweave tests."""

import logging
from collections.abc import Callable
from datetime import datetime

import pytest
import structlog
from structlog.testing import LogCapture
from structlog.typing import FilteringBoundLogger

from docweave.templates import (
    CustomTemplate,
    Interpolator,
    TemplateEngine,
    TemplateMeta,
    TemplateRegistry,
    TemplateScope,
    create_helper_registry,
)

FIXED_NOW = datetime(2024, 3, 7, 9, 5, 1)


@pytest.fixture
def log_capture() -> LogCapture:
    """Collect log entries emitted through ``capture_logger``."""
    return LogCapture()


@pytest.fixture
def capture_logger(log_capture: LogCapture) -> FilteringBoundLogger:
    """Return a debug-level logger whose entries land in ``log_capture``."""
    return structlog.wrap_logger(
        None,
        processors=[log_capture],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
        context_class=dict,
    )


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def interpolator() -> Interpolator:
    """Interpolator with the built-in helpers and a fixed clock."""
    return Interpolator(create_helper_registry(clock=lambda: FIXED_NOW))


@pytest.fixture
def make_meta() -> Callable[..., TemplateMeta]:
    """Return a factory function to create TemplateMeta with defaults."""

    def _make(template_id: str = "base", **overrides: object) -> TemplateMeta:
        defaults: dict[str, object] = {
            "id": template_id,
            "name": "Base Template",
            "description": "A template for tests",
            "version": "1.0.0",
            "category": "product",
            "scope": TemplateScope.STANDARD,
        }
        defaults.update(overrides)
        return TemplateMeta(**defaults)  # pyright: ignore[reportArgumentType]

    return _make


@pytest.fixture
def make_template(
    make_meta: Callable[..., TemplateMeta],
) -> Callable[..., CustomTemplate]:
    """Return a factory function to create CustomTemplate with defaults.

    Only the fields passed as overrides are set explicitly on the template.
    """

    def _make(template_id: str = "base", **overrides: object) -> CustomTemplate:
        fields: dict[str, object] = {"meta": make_meta(template_id)}
        fields.update(overrides)
        return CustomTemplate(**fields)  # pyright: ignore[reportArgumentType]

    return _make


@pytest.fixture
def registry() -> TemplateRegistry:
    return TemplateRegistry()


@pytest.fixture
def engine(
    registry: TemplateRegistry,
    capture_logger: FilteringBoundLogger,
) -> TemplateEngine:
    """Engine over ``registry`` with a fixed clock and captured logs."""
    return TemplateEngine(registry, logger=capture_logger, clock=lambda: FIXED_NOW)
