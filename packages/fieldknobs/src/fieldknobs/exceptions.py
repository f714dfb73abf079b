"""Exception hierarchy for fieldknobs.

Two families of exceptions live here and they must not be confused:

- **Validation failures** (``ValidationError`` / ``ValidationErrors`` in
  :mod:`fieldknobs.errors`) are expected outcomes. Validators *return* them.
- **Programmer errors** (``RuleContractError``, ``ConfigurationError``, ...)
  signal a broken rule configuration or a bad catalog. They are *raised* and
  are never turned into a validation failure.

Example:
    ```python
    from fieldknobs.exceptions import FieldknobsError, RuleContractError

    try:
        validator.validate()
    except RuleContractError as e:
        logger.error(f"Broken rule: {e}")
        if e.context:
            logger.error(f"Context: {e.context}")
    ```
"""

from typing import Any, Dict


class FieldknobsError(Exception):
    """Base exception for fieldknobs.

    Supports an optional context dictionary so errors can carry structured
    details (field names, codes, offending values) next to the message.

    Attributes:
        context: Dictionary containing contextual information about the error

    Args:
        message: Human-readable error message
        context: Optional dictionary with error context
    """

    def __init__(self, message: str = "", context: Dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}


class ConfigurationError(FieldknobsError):
    """Raised when a translation catalog or configuration source is invalid.

    Example:
        ```python
        raise ConfigurationError(
            "Unsupported catalog format",
            context={"path": "messages.ini", "supported": [".yaml", ".yml", ".json"]}
        )
        ```
    """

    pass


class NotFoundError(FieldknobsError):
    """Raised when a requested item is not registered."""

    pass


class CatalogNotFoundError(NotFoundError):
    """Raised when a translation catalog file does not exist."""

    pass


class RuleContractError(FieldknobsError, TypeError):
    """Raised when a rule handler breaks its return-value contract.

    A custom check or an iteration handler returned something that is neither
    a boolean, ``None``, an exception, an ``Outcome`` nor a validatable; or a
    collection rule was applied to a value that is not a sequence, a mapping
    or a record. This is a bug in the rule configuration, not bad input.
    """

    pass


class CompositeError(FieldknobsError):
    """Low-level error summarising several alternative failures.

    Used as the cause of the ``some_of`` failure produced by
    :func:`fieldknobs.compose.some`.

    Attributes:
        errors: The collected failures, in evaluation order
    """

    def __init__(self, message: str, errors: Any = None):
        super().__init__(message, context={"count": len(errors) if errors is not None else 0})
        self.errors = errors


__all__ = [
    "FieldknobsError",
    "ConfigurationError",
    "NotFoundError",
    "CatalogNotFoundError",
    "RuleContractError",
    "CompositeError",
]
