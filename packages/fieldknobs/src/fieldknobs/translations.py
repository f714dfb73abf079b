"""Message templates and translators for validation errors.

Every error code may have a registered entry made of a default template
and/or a translator function. A registry also holds one optional default
translator used for codes without their own translator.

Resolution order when an error is rendered:

1. the code's entry has a translator: call it with the chosen template
2. the code's entry has a template and the error has no explicit format:
   that template is chosen
3. otherwise the error's own format is chosen
4. a default translator is configured: delegate to it
5. otherwise substitute ``{name}`` placeholders literally

Example:
    ```python
    from fieldknobs.translations import TranslationRegistry

    registry = TranslationRegistry("forms")
    registry.register("min_length", template="{label} needs {min}+ characters")
    registry.resolve("min_length", None, {"label": "Name", "min": 3})
    # 'Name needs 3+ characters'
    ```

The process-wide registry returned by :func:`get_registry` is shared
configuration. Set it up once at startup; every accessor takes the registry
lock so late reconfiguration does not tear reads.
"""

from __future__ import annotations

import logging
import re
import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Dict, List

from .exceptions import ConfigurationError, NotFoundError
from .kinds import Kind

logger = logging.getLogger(__name__)

Translator = Callable[[str, Dict[str, Any]], str]

_PLACEHOLDER = re.compile(r"\{([^{}]+)\}")

KIND_NAMES: Dict[Kind, str] = {
    Kind.NONE: "null value",
    Kind.BOOL: "boolean",
    Kind.INT: "integer",
    Kind.FLOAT: "floating point number",
    Kind.COMPLEX: "complex number",
    Kind.STRING: "string",
    Kind.BYTES: "byte string",
    Kind.SEQUENCE: "list",
    Kind.MAPPING: "mapping",
    Kind.SET: "set",
    Kind.RECORD: "record",
}


def substitute(template: str, params: Mapping[str, Any]) -> str:
    """Replace ``{name}`` tokens with ``str(params[name])``.

    A single pass: substituted text is not scanned again and unknown tokens
    are left as they are.

    Args:
        template: Message template
        params: Placeholder values

    Returns:
        The substituted text
    """
    if not template:
        return ""

    def replace(match: re.Match) -> str:
        name = match.group(1)
        if name in params:
            return str(params[name])
        return match.group(0)

    return _PLACEHOLDER.sub(replace, template)


def typeof_translator(template: str, params: Dict[str, Any]) -> str:
    """Name the expected category of a failed ``typeof`` rule."""
    kind = params.get("kind")
    name = KIND_NAMES.get(kind) if isinstance(kind, Kind) else None
    if name is None:
        return f"{params.get('label', '')} has an invalid type"
    return f"{params.get('label', '')} is not a valid {name}"


@dataclass(frozen=True)
class Translation:
    """Registered rendering entry for one error code."""

    template: str | None = None
    translator: Translator | None = None


DEFAULT_CATALOG: Dict[str, Any] = {
    "required": "{label} is required",
    "required_if": "{label} is required",
    "required_with": "{label} is required",
    "typeof": Translation(translator=typeof_translator),
    "is_string": Translation(translator=typeof_translator),
    "is_lower": "{label} must be lowercase",
    "is_upper": "{label} must be uppercase",
    "contains": "{label} must contain '{substr}'",
    "contains_any": "{label} must contain at least one of '{chars}'",
    "excludes": "{label} must not contain '{substr}'",
    "excludes_all": "{label} must not contain any of '{chars}'",
    "ends_with": "{label} must end with '{suffix}'",
    "ends_not_with": "{label} must not end with '{suffix}'",
    "starts_with": "{label} must start with '{prefix}'",
    "starts_not_with": "{label} must not start with '{prefix}'",
    "one_of": "{label} must be one of [{items}]",
    "not_empty": "{label} must not be empty",
    "length": "{label} must have a length of {length}",
    "min_length": "{label} must have a length of at least {min}",
    "max_length": "{label} must have a length of at most {max}",
    "length_between": "{label} must have a length between {min} and {max}",
    "greater_than": "{label} must be greater than {min}",
    "greater_equal_than": "{label} must be greater than or equal to {min}",
    "equal": "{label} must be equal to {another}",
    "not_equal": "{label} must not be equal to {another}",
    "less_equal_than": "{label} must be less than or equal to {max}",
    "less_than": "{label} must be less than {max}",
    "between": "{label} must be between {min} and {max}",
    "not_between": "{label} must be less than {min} or greater than {max}",
    "some": "at least one item of {label} must pass validation",
    "every": "every item of {label} must pass validation",
    "some_of": "at least one of the following must pass",
    "index_by": "incomplete parameters",
}


def to_translation(code: str, entry: Any) -> Translation:
    """Normalize a catalog entry.

    Args:
        code: Error code the entry belongs to (for error reporting)
        entry: A template string, a Translation, a translator callable, or a
            mapping with ``template`` and/or ``translator`` keys

    Returns:
        The entry as a Translation

    Raises:
        ConfigurationError: If the entry has an unsupported shape
    """
    if isinstance(entry, Translation):
        return entry
    if isinstance(entry, str):
        return Translation(template=entry)
    if isinstance(entry, Mapping):
        unknown = set(entry) - {"template", "translator"}
        template = entry.get("template")
        translator = entry.get("translator")
        if (
            not unknown
            and (template is None or isinstance(template, str))
            and (translator is None or callable(translator))
        ):
            return Translation(template=template, translator=translator)
    elif callable(entry):
        return Translation(translator=entry)
    raise ConfigurationError(
        f"Invalid translation entry for code '{code}'",
        context={"code": code, "entry": entry},
    )


class TranslationRegistry:
    """Thread-safe mapping of error codes to templates and translators.

    Attributes:
        name: Name of the registry (for logging/debugging)

    Args:
        name: Name for this registry instance
        catalog: Optional initial catalog (code -> entry, see ``to_translation``)
        default_translator: Optional translator for codes without their own

    Example:
        ```python
        registry = TranslationRegistry("isolated", catalog=DEFAULT_CATALOG)
        registry.has("required")
        # True
        ```
    """

    def __init__(
        self,
        name: str = "translations",
        catalog: Mapping[str, Any] | None = None,
        default_translator: Translator | None = None,
    ):
        self._name = name
        self._entries: Dict[str, Translation] = {}
        self._default_translator = default_translator
        self._lock = threading.RLock()
        if catalog:
            self.update(catalog)

    @property
    def name(self) -> str:
        """Get registry name."""
        return self._name

    @property
    def default_translator(self) -> Translator | None:
        """Get the translator used when a code has none of its own."""
        with self._lock:
            return self._default_translator

    @default_translator.setter
    def default_translator(self, translator: Translator | None) -> None:
        with self._lock:
            self._default_translator = translator
        logger.debug(f"Default translator of {self._name} set to {translator!r}")

    def register(
        self,
        code: str,
        template: str | None = None,
        translator: Translator | None = None,
        allow_overwrite: bool = True,
    ) -> None:
        """Register the template and/or translator of an error code.

        Args:
            code: Error code
            template: Default message template
            translator: Translator called for this code
            allow_overwrite: Whether to replace an existing entry

        Raises:
            ConfigurationError: If the code exists and allow_overwrite is False
        """
        with self._lock:
            if not allow_overwrite and code in self._entries:
                raise ConfigurationError(
                    f"Translation '{code}' already registered in {self._name}",
                    context={"code": code, "registry": self._name},
                )
            self._entries[code] = Translation(template=template, translator=translator)
        logger.debug(f"Registered translation '{code}' in {self._name}")

    def update(self, catalog: Mapping[str, Any]) -> None:
        """Register every entry of a catalog, replacing existing ones.

        Args:
            catalog: Mapping of code to entry (see ``to_translation``)
        """
        entries = {code: to_translation(code, entry) for code, entry in catalog.items()}
        with self._lock:
            self._entries.update(entries)
        logger.debug(f"Loaded {len(entries)} translations into {self._name}")

    def unregister(self, code: str) -> Translation:
        """Unregister and return the entry of a code.

        Raises:
            NotFoundError: If the code is not registered
        """
        with self._lock:
            if code not in self._entries:
                raise NotFoundError(
                    f"Translation not found: {code}",
                    context={"code": code, "registry": self._name},
                )
            return self._entries.pop(code)

    def get(self, code: str) -> Translation:
        """Get the entry of a code.

        Raises:
            NotFoundError: If the code is not registered
        """
        with self._lock:
            if code not in self._entries:
                raise NotFoundError(
                    f"Translation not found: {code}",
                    context={"code": code, "registry": self._name},
                )
            return self._entries[code]

    def get_optional(self, code: str) -> Translation | None:
        with self._lock:
            return self._entries.get(code)

    def has(self, code: str) -> bool:
        with self._lock:
            return code in self._entries

    def codes(self) -> List[str]:
        with self._lock:
            return list(self._entries.keys())

    def count(self) -> int:
        with self._lock:
            return len(self._entries)

    def clear(self) -> None:
        """Remove every entry and the default translator."""
        with self._lock:
            self._entries.clear()
            self._default_translator = None

    def resolve(self, code: str, format: str | None, params: Dict[str, Any]) -> str:
        """Produce the display text of an error.

        Args:
            code: Error code
            format: The error's explicit template, if any
            params: Placeholder values (including ``label`` and ``value``)

        Returns:
            The final message
        """
        with self._lock:
            entry = self._entries.get(code)
            default_translator = self._default_translator

        message = format or ""
        if entry is not None:
            if not message and entry.template is not None:
                message = entry.template
            if entry.translator is not None:
                return entry.translator(message, params)

        if default_translator is not None:
            return default_translator(message, params)

        return substitute(message, params)


_registry: TranslationRegistry | None = None
_registry_lock = threading.Lock()


def get_registry() -> TranslationRegistry:
    """Get the process-wide registry, creating it with the default catalog."""
    global _registry
    with _registry_lock:
        if _registry is None:
            _registry = TranslationRegistry("default", catalog=DEFAULT_CATALOG)
        return _registry


def reset_registry() -> TranslationRegistry:
    """Replace the process-wide registry with a fresh default one."""
    global _registry
    with _registry_lock:
        _registry = TranslationRegistry("default", catalog=DEFAULT_CATALOG)
        return _registry


def register_translation(code: str, template: str | None = None, translator: Translator | None = None) -> None:
    get_registry().register(code, template=template, translator=translator)


def set_default_translator(translator: Translator | None) -> None:
    get_registry().default_translator = translator


def get_default_translator() -> Translator | None:
    return get_registry().default_translator
