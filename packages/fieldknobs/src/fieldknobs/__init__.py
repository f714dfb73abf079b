"""Composable field validation with localizable errors.

Build a rule chain for each field, evaluate it, and collect structured
errors keyed by field:

- **Valuer**: ordered requirements (empty values) and rules (non-empty values)
- **Matcher**: value-driven dispatch to sub-validators
- **every / some**: element-wise validation of sequences, mappings and records
- **validate / check / index_by**: composition across fields
- **Translations**: per-code templates and translators, with a default catalog

Example:
    ```python
    from fieldknobs import from_mapping, validate

    field = from_mapping({"name": "", "age": 12})
    errs = validate(
        field("name", "Name").required(),
        field("age", "Age").greater_equal_than(18),
    )
    print(errs)
    # Name is required
    # Age must be greater than or equal to 18
    ```
"""

from fieldknobs.compose import (
    Checker,
    IndexBy,
    check,
    every,
    from_mapping,
    index_by,
    some,
    validate,
    wrap,
)
from fieldknobs.config import configure, load_builtin_catalog, load_catalog
from fieldknobs.emptiness import is_empty, is_not_empty
from fieldknobs.errors import (
    ErrorOption,
    ValidationError,
    ValidationErrors,
    with_code,
    with_format,
    with_param,
)
from fieldknobs.exceptions import (
    CatalogNotFoundError,
    CompositeError,
    ConfigurationError,
    FieldknobsError,
    NotFoundError,
    RuleContractError,
)
from fieldknobs.iteration import Item, Shape
from fieldknobs.kinds import Kind, kind_of
from fieldknobs.matcher import Matcher, strict_equal
from fieldknobs.outcome import Outcome, Validatable
from fieldknobs.translations import (
    DEFAULT_CATALOG,
    Translation,
    TranslationRegistry,
    Translator,
    get_default_translator,
    get_registry,
    register_translation,
    reset_registry,
    set_default_translator,
)
from fieldknobs.valuer import Valuer, value

__version__ = "1.0.0"

__all__ = [
    # Version
    "__version__",
    # Validators
    "Valuer",
    "value",
    "Matcher",
    "strict_equal",
    "Item",
    "Shape",
    "Outcome",
    "Validatable",
    # Composition
    "Checker",
    "IndexBy",
    "check",
    "every",
    "some",
    "validate",
    "index_by",
    "wrap",
    "from_mapping",
    # Errors
    "ValidationError",
    "ValidationErrors",
    "ErrorOption",
    "with_code",
    "with_format",
    "with_param",
    # Exceptions
    "FieldknobsError",
    "ConfigurationError",
    "NotFoundError",
    "CatalogNotFoundError",
    "RuleContractError",
    "CompositeError",
    # Kinds and emptiness
    "Kind",
    "kind_of",
    "is_empty",
    "is_not_empty",
    # Translations
    "DEFAULT_CATALOG",
    "Translation",
    "TranslationRegistry",
    "Translator",
    "get_registry",
    "reset_registry",
    "register_translation",
    "set_default_translator",
    "get_default_translator",
    # Configuration
    "configure",
    "load_catalog",
    "load_builtin_catalog",
]
