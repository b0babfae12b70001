"""Exception to (status code, message) mapping.

A mapper checks a command's own rules first, then the shared defaults.
Commands customize behaviour by declaring ``error_rules``; they never
override the mapper itself.
"""

import asyncio
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

from pydantic import ValidationError as PydanticValidationError

from ..errors import AzureError

TROUBLESHOOTING_URL = "https://aka.ms/azmcp/troubleshooting"
TROUBLESHOOTING_HINT = (
    f"To mitigate this issue, please refer to the troubleshooting guidelines here at {TROUBLESHOOTING_URL}."
)

ErrorPredicate = Callable[[BaseException], bool]
MessageFactory = Callable[[BaseException], str]


@dataclass(frozen=True)
class ErrorRule:
    """One row of an error mapping table.

    Attributes:
        match: Predicate selecting the exceptions this rule handles
        status_code: Status to report; None keeps the default status
        message: Builds the response message; None keeps the default message
    """
    match: ErrorPredicate
    status_code: Optional[int] = None
    message: Optional[MessageFactory] = None


def status_of(error: BaseException) -> Optional[int]:
    """Status code carried by an error (typed Azure errors and SDK HTTP errors)."""
    status = getattr(error, "status_code", None)
    return status if isinstance(status, int) else None


def has_status(*codes: int) -> ErrorPredicate:
    """Predicate matching errors that carry one of the given status codes."""
    return lambda error: status_of(error) in codes


def is_instance(*types: type) -> ErrorPredicate:
    return lambda error: isinstance(error, types)


def _details(error: BaseException) -> str:
    return str(error)


DEFAULT_RULES: Tuple[ErrorRule, ...] = (
    ErrorRule(
        match=lambda error: isinstance(error, PydanticValidationError),
        status_code=400,
        message=lambda error: f"Invalid arguments. Details: {error}",
    ),
    ErrorRule(
        match=lambda error: isinstance(error, (asyncio.TimeoutError, TimeoutError)) and not isinstance(error, AzureError),
        status_code=504,
        message=lambda error: f"The operation timed out. Details: {error}",
    ),
    ErrorRule(
        match=has_status(401),
        status_code=401,
        message=lambda error: (
            "Authentication failed. Please run 'az login' to sign in to Azure, "
            f"or verify the configured credentials. Details: {error}"
        ),
    ),
    ErrorRule(
        match=has_status(403),
        status_code=403,
        message=lambda error: f"Authorization failed. Verify you have access to the resource. Details: {error}",
    ),
    ErrorRule(
        match=has_status(404),
        status_code=404,
        message=lambda error: (
            "Resource not found. Verify the resource name, resource group and subscription, "
            f"and ensure you have access. Details: {error}"
        ),
    ),
    ErrorRule(
        match=has_status(429),
        status_code=429,
        message=lambda error: (
            "Request was throttled by Azure. Wait before retrying the operation. "
            f"Details: {error}"
        ),
    ),
    ErrorRule(
        match=lambda error: isinstance(error, AzureError),
        message=_details,
    ),
    ErrorRule(
        match=lambda error: isinstance(error, ValueError),
        status_code=400,
        message=_details,
    ),
)


def default_status_code(error: BaseException) -> int:
    """Status code used when no rule overrides it."""
    for rule in DEFAULT_RULES:
        if rule.match(error) and rule.status_code is not None:
            return rule.status_code
    status = status_of(error)
    if status is not None and 400 <= status < 600:
        return status
    return 500


def with_troubleshooting(message: str) -> str:
    message = message.rstrip()
    if not message.endswith("."):
        message += "."
    return f"{message} {TROUBLESHOOTING_HINT}"


class ErrorMapper:
    """Table-driven mapping from exceptions to response status and message."""

    def __init__(self, rules: Sequence[ErrorRule] = (), defaults: Sequence[ErrorRule] = DEFAULT_RULES):
        self.rules = tuple(rules)
        self.defaults = tuple(defaults)

    def map(self, error: BaseException) -> Tuple[int, str]:
        """Map an exception to ``(status_code, message)``.

        Unrecognized exceptions map to 500 with the raw exception text and the
        troubleshooting pointer appended.
        """
        for rule in self.rules + self.defaults:
            if not rule.match(error):
                continue
            status = rule.status_code if rule.status_code is not None else default_status_code(error)
            message = rule.message(error) if rule.message is not None else self._fallback_message(error, status)
            if status >= 500 and TROUBLESHOOTING_URL not in message:
                message = with_troubleshooting(message)
            return status, message

        return 500, with_troubleshooting(str(error) or type(error).__name__)

    def status_code(self, error: BaseException) -> int:
        return self.map(error)[0]

    def message(self, error: BaseException) -> str:
        return self.map(error)[1]

    @staticmethod
    def _fallback_message(error: BaseException, status: int) -> str:
        return str(error) or type(error).__name__
