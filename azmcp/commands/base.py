"""Command contract shared by every command.

Each invocation walks a small state machine:

    Created -> OptionsRegistered -> Parsed -> Validated -> Bound
            -> Executed -> Responded

``BaseCommand.execute`` drives it and is the single boundary that catches
exceptions: whatever the service call raises is logged once, mapped to a
status code and message, and returned in the response envelope.
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, List, Mapping, Optional, Sequence, Tuple, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict

from ..config import get_settings
from ..logging_config import CommandInvocationLogger, get_logger
from ..options import (
    Option,
    OptionDefinitions,
    OptionParser,
    ParseResult,
    missing_required_message,
)
from ..response import CommandResponse, ExceptionResult
from ..retry import RetryPolicyOptions
from .errors import ErrorMapper, ErrorRule


class CommandState(str, Enum):
    """Lifecycle states of a single invocation."""
    CREATED = "created"
    OPTIONS_REGISTERED = "options_registered"
    PARSED = "parsed"
    VALIDATED = "validated"
    BOUND = "bound"
    EXECUTED = "executed"
    RESPONDED = "responded"


@dataclass(frozen=True)
class CommandMetadata:
    """Descriptive flags consumed by tooling and policy layers."""
    destructive: bool = False
    idempotent: bool = False
    open_world: bool = False
    read_only: bool = False
    local_required: bool = False
    secret: bool = False

    def to_dict(self) -> Dict[str, bool]:
        return {
            "destructive": self.destructive,
            "idempotent": self.idempotent,
            "openWorld": self.open_world,
            "readOnly": self.read_only,
            "localRequired": self.local_required,
            "secret": self.secret,
        }


READ_ONLY_METADATA = CommandMetadata(idempotent=True, open_world=True, read_only=True)


@dataclass
class ValidationResult:
    is_valid: bool = True
    error_message: Optional[str] = None


@dataclass
class CommandContext:
    """Per-invocation state; never shared across requests."""
    response: CommandResponse = field(default_factory=CommandResponse)
    state: CommandState = CommandState.OPTIONS_REGISTERED

    def advance(self, state: CommandState) -> None:
        self.state = state

    def respond(self) -> CommandResponse:
        self.state = CommandState.RESPONDED
        return self.response


@dataclass(frozen=True)
class CommandDefinition:
    """Immutable description of a command's surface."""
    name: str
    description: str
    options: Tuple[Option, ...]

    def parser(self) -> OptionParser:
        parser = OptionParser(self.name)
        for option in self.options:
            option.apply(parser)
        return parser

    def parse(self, args: Union[str, Sequence[str]] = ()) -> ParseResult:
        """Parse CLI tokens against this command's options."""
        return self.parser().parse(args)

    def parse_arguments(self, arguments: Optional[Mapping[str, Any]]) -> ParseResult:
        """Parse a tool-call parameters object against this command's options."""
        return self.parser().parse_arguments(arguments)


def _option_alias(field_name: str) -> str:
    return field_name.replace("_", "-")


class BaseOptions(BaseModel):
    """Typed options bound from a parse result; fields alias option names."""

    model_config = ConfigDict(alias_generator=_option_alias, populate_by_name=True, extra="ignore")


class GlobalOptions(BaseOptions):
    tenant: Optional[str] = None
    auth_method: Optional[str] = None
    retry_policy: Optional[RetryPolicyOptions] = None


class SubscriptionOptions(GlobalOptions):
    subscription: Optional[str] = None
    resource_group: Optional[str] = None


TOptions = TypeVar("TOptions", bound=BaseOptions)


class BaseCommand(ABC, Generic[TOptions]):
    """Base class for all commands.

    Subclasses declare identity (``name``, ``title``, ``description``),
    ``metadata``, their options (``register_options``), the options model they
    bind into, optional ``error_rules``, and implement ``run`` which performs
    exactly one service operation and returns the typed result.
    """

    name: str = ""
    title: str = ""
    description: str = ""
    metadata: CommandMetadata = CommandMetadata()
    hidden: bool = False
    options_model: Type[BaseOptions] = BaseOptions
    error_rules: Tuple[ErrorRule, ...] = ()

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or get_logger(f"{type(self).__module__}.{type(self).__name__}")
        parser = OptionParser(self.name)
        self.register_options(parser)
        self._definition = CommandDefinition(
            name=self.name,
            description=self.description.strip(),
            options=parser.options,
        )
        self._error_mapper = ErrorMapper(self.error_rules)

    # ------------------------------------------------------------------
    # Surface
    # ------------------------------------------------------------------

    def register_options(self, parser: OptionParser) -> None:
        """Add this command's options to ``parser``.

        Called once per instance; subclasses call ``super()`` first.
        """

    def get_command(self) -> CommandDefinition:
        return self._definition

    @property
    def options(self) -> Tuple[Option, ...]:
        return self._definition.options

    # ------------------------------------------------------------------
    # Bind and validate
    # ------------------------------------------------------------------

    def bind_values(self, parse_result: ParseResult) -> Dict[str, Any]:
        """Raw values handed to the options model; subclasses may add derived ones."""
        return dict(parse_result.values)

    def bind_options(self, parse_result: ParseResult) -> TOptions:
        """Bind parsed values into the typed options model.

        Missing values stay None; absence is reported by ``validate``.
        """
        return self.options_model.model_validate(self.bind_values(parse_result))

    def missing_options(self, parse_result: ParseResult) -> List[str]:
        """Flags of required options without a value."""
        return list(parse_result.missing_required)

    def validate_options(self, parse_result: ParseResult) -> List[str]:
        """Command-specific validation errors beyond required-ness."""
        return []

    def validate(self, parse_result: ParseResult, response: Optional[CommandResponse] = None) -> ValidationResult:
        """Check parse errors and required options.

        On failure the response (if given) gets status 400 and the message.
        """
        errors = list(parse_result.errors)
        missing = self.missing_options(parse_result)
        if missing:
            errors.insert(0, missing_required_message(missing))
        errors.extend(self.validate_options(parse_result))

        if not errors:
            return ValidationResult(is_valid=True)

        message = "\n".join(errors)
        if response is not None:
            response.status = 400
            response.message = message
        return ValidationResult(is_valid=False, error_message=message)

    # ------------------------------------------------------------------
    # Execute
    # ------------------------------------------------------------------

    async def execute(self, context: CommandContext, parse_result: ParseResult) -> CommandResponse:
        """Run one invocation and return the populated response.

        Never raises for ``Exception`` subclasses; cancellation propagates.
        """
        started = time.monotonic()
        context.advance(CommandState.PARSED)

        if not self.validate(parse_result, context.response).is_valid:
            return self._finish(context, started)
        context.advance(CommandState.VALIDATED)

        invocation = CommandInvocationLogger(self.logger)
        options = None
        try:
            options = self.bind_options(parse_result)
            context.advance(CommandState.BOUND)
            invocation.start(self.name, **self.log_context(options))

            context.response.results = await self.run(context, options)
            context.advance(CommandState.EXECUTED)
            invocation.success(**self.result_summary(context.response.results))
        except Exception as ex:
            self.handle_exception(context, ex)
            if options is None:
                invocation.start(self.name, **parse_result.values)
            invocation.failure(ex, context.response.status)

        return self._finish(context, started)

    @abstractmethod
    async def run(self, context: CommandContext, options: TOptions) -> Any:
        """Invoke the service operation and return the result payload."""

    def _finish(self, context: CommandContext, started: float) -> CommandResponse:
        context.response.duration_ms = int((time.monotonic() - started) * 1000)
        return context.respond()

    def log_context(self, options: BaseOptions) -> Dict[str, Any]:
        """Key parameters recorded with every log line of an invocation."""
        return options.model_dump(exclude={"retry_policy"}, exclude_none=True)

    @staticmethod
    def result_summary(results: Any) -> Dict[str, Any]:
        if isinstance(results, list):
            return {"count": len(results)}
        return {}

    # ------------------------------------------------------------------
    # Errors
    # ------------------------------------------------------------------

    def get_status_code(self, error: BaseException) -> int:
        return self._error_mapper.status_code(error)

    def get_error_message(self, error: BaseException) -> str:
        return self._error_mapper.message(error)

    def handle_exception(self, context: CommandContext, error: BaseException) -> None:
        """Populate the response from an exception."""
        response = context.response
        response.status = self.get_status_code(error)
        response.message = self.get_error_message(error)
        response.results = ExceptionResult(message=str(error), type=type(error).__name__)


class GlobalCommand(BaseCommand[TOptions]):
    """Command taking the tenant, auth-method and retry options."""

    options_model = GlobalOptions

    def register_options(self, parser: OptionParser) -> None:
        super().register_options(parser)
        OptionDefinitions.Common.TENANT.apply(parser)
        OptionDefinitions.Common.AUTH_METHOD.apply(parser)
        for option in OptionDefinitions.RetryPolicy.ALL:
            option.apply(parser)

    def bind_values(self, parse_result: ParseResult) -> Dict[str, Any]:
        values = super().bind_values(parse_result)
        values["retry_policy"] = RetryPolicyOptions.from_parse_result(parse_result)
        return values


class SubscriptionCommand(GlobalCommand[TOptions]):
    """Command scoped to a subscription.

    ``--subscription`` falls back to ``AZURE_SUBSCRIPTION_ID`` when omitted.
    """

    options_model = SubscriptionOptions

    def register_options(self, parser: OptionParser) -> None:
        super().register_options(parser)
        OptionDefinitions.Common.SUBSCRIPTION.apply(parser)

    def default_subscription(self) -> Optional[str]:
        return get_settings().azure_subscription_id

    def missing_options(self, parse_result: ParseResult) -> List[str]:
        missing = super().missing_options(parse_result)
        if not parse_result.has_value(OptionDefinitions.Common.SUBSCRIPTION.name) and not self.default_subscription():
            missing.insert(0, OptionDefinitions.Common.SUBSCRIPTION.flag)
        return missing

    def bind_values(self, parse_result: ParseResult) -> Dict[str, Any]:
        values = super().bind_values(parse_result)
        if values.get("subscription") is None:
            values["subscription"] = self.default_subscription()
        return values
