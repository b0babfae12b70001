"""Option model and argument parsing.

An ``Option`` describes one named command argument. Commands register their
options with an ``OptionParser`` once, at construction time; the parser then
turns either CLI tokens or a tool-call parameters object into a
``ParseResult`` holding raw values and parse errors.
"""

import re
import shlex
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

MISSING_REQUIRED_PREFIX = "Missing Required options"

_TRUE_LITERALS = {"true", "1", "yes", "on"}
_FALSE_LITERALS = {"false", "0", "no", "off"}


class OptionKind(str, Enum):
    """Value type of an option."""
    STRING = "string"
    STRING_ARRAY = "string_array"
    INT = "integer"
    FLOAT = "number"
    BOOL = "boolean"
    DATETIME = "datetime"


class DuplicateOptionError(ValueError):
    """Raised at registration time when a command declares an option twice."""
    pass


@dataclass(frozen=True)
class Option:
    """Definition of a single named command argument.

    Attributes:
        name: Option name without the leading dashes (e.g., "resource-group")
        description: Human-readable description
        kind: Value type used for conversion
        required: Whether a value must be supplied
        allow_multiple_per_token: Array options only; accept several values
            after a single ``--name``
        choices: Optional set of accepted string values
    """
    name: str
    description: str
    kind: OptionKind = OptionKind.STRING
    required: bool = False
    allow_multiple_per_token: bool = False
    choices: Optional[Tuple[str, ...]] = None

    @property
    def flag(self) -> str:
        return f"--{self.name}"

    @property
    def is_array(self) -> bool:
        return self.kind is OptionKind.STRING_ARRAY

    def as_required(self) -> "Option":
        return replace(self, required=True)

    def as_optional(self) -> "Option":
        return replace(self, required=False)

    def apply(self, parser: "OptionParser") -> None:
        """Register this option with a parser."""
        parser.add_option(self)

    def convert(self, raw: Any) -> Any:
        """Convert a raw token or JSON value to this option's type.

        Raises:
            ValueError: If the value cannot be converted
        """
        if self.kind is OptionKind.STRING_ARRAY:
            items = raw if isinstance(raw, (list, tuple)) else [raw]
            return [str(item) for item in items]

        if isinstance(raw, (list, tuple)):
            if len(raw) != 1:
                raise ValueError(f"Option '{self.flag}' expects a single value")
            raw = raw[0]

        if self.kind is OptionKind.BOOL:
            if isinstance(raw, bool):
                return raw
            text = str(raw).strip().lower()
            if text in _TRUE_LITERALS:
                return True
            if text in _FALSE_LITERALS:
                return False
            raise ValueError(f"Cannot parse argument '{raw}' for option '{self.flag}' as expected type 'bool'.")

        if self.kind is OptionKind.INT:
            if isinstance(raw, bool):
                raise ValueError(f"Cannot parse argument '{raw}' for option '{self.flag}' as expected type 'int'.")
            try:
                return int(raw)
            except (TypeError, ValueError):
                raise ValueError(
                    f"Cannot parse argument '{raw}' for option '{self.flag}' as expected type 'int'."
                ) from None

        if self.kind is OptionKind.FLOAT:
            try:
                return float(raw)
            except (TypeError, ValueError):
                raise ValueError(
                    f"Cannot parse argument '{raw}' for option '{self.flag}' as expected type 'float'."
                ) from None

        if self.kind is OptionKind.DATETIME:
            if isinstance(raw, datetime):
                return raw
            text = str(raw).strip()
            if text.endswith("Z"):
                text = text[:-1] + "+00:00"
            try:
                return datetime.fromisoformat(text)
            except ValueError:
                raise ValueError(
                    f"Cannot parse argument '{raw}' for option '{self.flag}' as expected type 'DateTime'."
                ) from None

        value = str(raw)
        if self.choices and value.lower() not in self.choices:
            raise ValueError(
                f"Argument '{value}' not recognized for option '{self.flag}'. "
                f"Must be one of: {', '.join(self.choices)}"
            )
        return value.lower() if self.choices else value

    def to_json_schema(self) -> Dict[str, Any]:
        """JSON schema fragment describing this option for tool clients."""
        schema: Dict[str, Any] = {"description": self.description}
        if self.kind is OptionKind.STRING_ARRAY:
            schema["type"] = "array"
            schema["items"] = {"type": "string"}
        elif self.kind is OptionKind.DATETIME:
            schema["type"] = "string"
            schema["format"] = "date-time"
        else:
            schema["type"] = self.kind.value
        if self.choices:
            schema["enum"] = list(self.choices)
        return schema


@dataclass
class ParseResult:
    """Raw parsed argument values for one invocation.

    Attributes:
        values: Converted values keyed by option name
        errors: Structural parse errors (unknown options, bad values)
        missing_required: Flags of required options with no value
        tokens: The tokens that were parsed (CLI surface only)
    """
    values: Dict[str, Any] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)
    missing_required: List[str] = field(default_factory=list)
    tokens: Tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors and not self.missing_required

    def has_value(self, name: str) -> bool:
        return self.values.get(name) is not None

    def get_value(self, name: str, default: Any = None) -> Any:
        value = self.values.get(name)
        return default if value is None else value


def missing_required_message(flags: Iterable[str]) -> str:
    return f"{MISSING_REQUIRED_PREFIX}: {', '.join(flags)}"


def normalize_option_name(key: str) -> str:
    """Map parameter keys like ``resourceGroup`` or ``resource_group`` to ``resource-group``."""
    key = key.lstrip("-")
    key = re.sub(r"(?<=[a-z0-9])([A-Z])", r"-\1", key)
    return key.replace("_", "-").lower()


class OptionParser:
    """Ordered set of options for one command."""

    def __init__(self, command_name: str = ""):
        self.command_name = command_name
        self._options: Dict[str, Option] = {}

    def add_option(self, option: Option) -> None:
        """Register an option.

        Raises:
            DuplicateOptionError: If an option with the same name exists
        """
        if option.name in self._options:
            raise DuplicateOptionError(
                f"Option '{option.flag}' is already registered on command '{self.command_name}'"
            )
        self._options[option.name] = option

    @property
    def options(self) -> Tuple[Option, ...]:
        return tuple(self._options.values())

    def get(self, name: str) -> Optional[Option]:
        return self._options.get(name)

    def parse(self, args: Union[str, Sequence[str]]) -> ParseResult:
        """Parse CLI tokens.

        Accepts ``--name value``, ``--name=value``, bare ``--flag`` for
        booleans, and repeated ``--name`` (or several values per token when
        the option allows it) for arrays.
        """
        tokens = shlex.split(args) if isinstance(args, str) else list(args)
        result = ParseResult(tokens=tuple(tokens))

        index = 0
        while index < len(tokens):
            token = tokens[index]
            index += 1

            if not token.startswith("--"):
                result.errors.append(f"Unrecognized command or argument '{token}'.")
                continue

            name, has_inline, inline_value = token[2:].partition("=")
            option = self._options.get(name)
            if option is None:
                result.errors.append(f"Unrecognized command or argument '{token}'.")
                continue

            raw_values: List[str] = []
            if has_inline:
                raw_values.append(inline_value)
            elif option.kind is OptionKind.BOOL:
                if index < len(tokens) and tokens[index].lower() in _TRUE_LITERALS | _FALSE_LITERALS:
                    raw_values.append(tokens[index])
                    index += 1
                else:
                    raw_values.append("true")
            else:
                while index < len(tokens) and not tokens[index].startswith("--"):
                    raw_values.append(tokens[index])
                    index += 1
                    if not (option.is_array and option.allow_multiple_per_token):
                        break

            if not raw_values:
                result.errors.append(f"Required argument missing for option: '{option.flag}'.")
                continue

            self._store(result, option, raw_values if option.is_array else raw_values[0])

        return self._finish(result)

    def parse_arguments(self, arguments: Optional[Mapping[str, Any]]) -> ParseResult:
        """Build a parse result from a tool-call parameters object."""
        result = ParseResult()
        for key, raw in (arguments or {}).items():
            if raw is None:
                continue
            option = self._options.get(key) or self._options.get(normalize_option_name(key))
            if option is None:
                result.errors.append(f"Unrecognized argument '{key}'.")
                continue
            self._store(result, option, raw)
        return self._finish(result)

    def _store(self, result: ParseResult, option: Option, raw: Any) -> None:
        try:
            value = option.convert(raw)
        except ValueError as e:
            result.errors.append(str(e))
            return

        if option.is_array and option.name in result.values:
            result.values[option.name].extend(value)
        else:
            result.values[option.name] = value

    def _finish(self, result: ParseResult) -> ParseResult:
        result.missing_required = [
            option.flag
            for option in self._options.values()
            if option.required and not result.has_value(option.name)
        ]
        return result


class OptionDefinitions:
    """Shared option definitions referenced by many commands (read-only)."""

    class Common:
        SUBSCRIPTION = Option(
            "subscription",
            "Specifies the Azure subscription to use. Accepts either a subscription ID (GUID) or display name. "
            "If not specified, the AZURE_SUBSCRIPTION_ID environment variable will be used instead.",
        )
        TENANT = Option(
            "tenant",
            "The Microsoft Entra ID tenant ID or name. This can be either the GUID identifier "
            "or the display name of your Entra ID tenant.",
        )
        AUTH_METHOD = Option(
            "auth-method",
            "Authentication method to use. Options: 'credential' (Azure CLI/managed identity), "
            "'key' (access key), or 'connectionString'.",
            choices=("credential", "key", "connectionstring"),
        )
        RESOURCE_GROUP = Option(
            "resource-group",
            "The name of the Azure resource group. This is a logical container for Azure resources.",
        )

    class RetryPolicy:
        DELAY = Option(
            "retry-delay",
            "Initial delay in seconds between retry attempts. For exponential backoff, this value is used as the base.",
            kind=OptionKind.FLOAT,
        )
        MAX_DELAY = Option(
            "retry-max-delay",
            "Maximum delay in seconds between retries, regardless of the retry strategy.",
            kind=OptionKind.FLOAT,
        )
        MAX_RETRIES = Option(
            "retry-max-retries",
            "Maximum number of retry attempts for failed operations before giving up.",
            kind=OptionKind.INT,
        )
        MODE = Option(
            "retry-mode",
            "Retry strategy to use. 'fixed' uses consistent delays, 'exponential' increases delay between attempts.",
            choices=("fixed", "exponential"),
        )
        NETWORK_TIMEOUT = Option(
            "retry-network-timeout",
            "Network operation timeout in seconds. Operations taking longer than this will be cancelled.",
            kind=OptionKind.FLOAT,
        )

        ALL = (DELAY, MAX_DELAY, MAX_RETRIES, MODE, NETWORK_TIMEOUT)
