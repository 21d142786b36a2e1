"""
LeanPrompt — Validation Decorators

Applies Pydantic validation to MCP tool inputs. Invalid input never reaches
the tool; callers get a structured INVALID_INPUT response instead.
"""

import functools
import inspect
import logging
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ValidationError

from ..errors import ErrorCode, make_error_response
from ..observability.monitoring import get_observability

logger = logging.getLogger(__name__)


def _validation_failure(func_name: str, error: ValidationError, kwargs: dict[str, Any]) -> dict[str, Any]:
    validation_errors = [
        {
            "field": " -> ".join(str(loc) for loc in err["loc"]),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in error.errors()
    ]

    logger.warning(
        f"Input validation failed for {func_name}",
        extra={
            "function": func_name,
            "validation_errors": validation_errors,
            "input_keys": sorted(kwargs),
        },
    )
    get_observability().increment(
        "validation.failed",
        tags={"function": func_name, "error_count": str(len(validation_errors))},
    )

    return make_error_response(
        error_code=ErrorCode.INVALID_INPUT,
        message="Input validation failed",
        context={"validation_errors": validation_errors, "function": func_name},
    )


def validate_input(schema: type[BaseModel]) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Decorator to validate tool inputs using a Pydantic schema.

    Args:
        schema: Pydantic model class for input validation

    Example:
        >>> @validate_input(CountTokensInput)
        ... async def count_tokens(text: str, model: str = "gpt-3.5-turbo"):
        ...     ...

    Error Response:
        {
            "success": False,
            "error_code": "INVALID_INPUT",
            "message": "Input validation failed",
            "details": {
                "validation_errors": [
                    {"field": "limit", "message": "...", "type": "less_than_equal"}
                ],
                "function": "pattern_effectiveness"
            }
        }
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                validated = schema(**kwargs)
            except ValidationError as e:
                return _validation_failure(func.__name__, e, kwargs)
            return await func(*args, **validated.model_dump())

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                validated = schema(**kwargs)
            except ValidationError as e:
                return _validation_failure(func.__name__, e, kwargs)
            return func(*args, **validated.model_dump())

        if inspect.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator
