"""Tool catalog entries returned by ``tools list``."""

from typing import List, Optional

from ...response import ResultModel


class OptionInfo(ResultModel):
    name: str
    description: str
    required: bool = False


class CommandInfo(ResultModel):
    name: str
    description: str
    command: str
    options: Optional[List[OptionInfo]] = None
