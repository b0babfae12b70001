"""Response envelope returned by every command invocation."""

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from pydantic_core import to_jsonable_python

SUCCESS_MESSAGE = "Success"


class ResultModel(BaseModel):
    """Base class for command result payloads.

    Fields are snake_case in Python and camelCase on the wire; both spellings
    are accepted when validating, so serialized results load back into the
    same model.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ExceptionResult(ResultModel):
    """Results payload attached to a failed invocation."""
    message: str
    type: str


@dataclass
class CommandResponse:
    """Uniform result container.

    Attributes:
        status: HTTP-style status code (200 on success)
        message: "Success" or a failure description
        results: Typed payload (pydantic model or list of models)
        duration_ms: Wall time of the invocation; not serialized
    """
    status: int = 200
    message: str = SUCCESS_MESSAGE
    results: Optional[Any] = None
    duration_ms: Optional[int] = None

    @property
    def is_success(self) -> bool:
        return 200 <= self.status < 300

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the ``{status, message, results}`` wire shape."""
        return {
            "status": self.status,
            "message": self.message,
            "results": to_jsonable_python(self.results, by_alias=True),
        }

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent, default=str)
