"""
Message schemas for the robot harness.

These models define every payload exchanged with the collaborating processes:
- Robot commands (a closed tagged union keyed on `command`)
- Log records for the log sink
- The termination directive for the cluster controller
- The inbound run options
- The routing envelope wrapping all of the above
"""

from enum import Enum
from typing import Annotated, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field


class CompassDirection(str, Enum):
    """Orientations a robot can face, in tie-break priority order."""
    NORTH = "NORTH"
    SOUTH = "SOUTH"
    WEST = "WEST"
    EAST = "EAST"


class _CommandBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: Optional[int] = Field(default=None, description="Sequence index assigned at generation")


class DropCommand(_CommandBase):
    """Place the robot at (x, y) facing direction."""
    command: Literal["DROP"] = "DROP"
    x: int = Field(..., description="Target column")
    y: int = Field(..., description="Target row")
    direction: CompassDirection = Field(..., description="Facing after the drop")


class MoveCommand(_CommandBase):
    """Advance one unit along the current direction."""
    command: Literal["MOVE"] = "MOVE"


class LeftCommand(_CommandBase):
    """Turn 90 degrees counter-clockwise."""
    command: Literal["LEFT"] = "LEFT"


class RightCommand(_CommandBase):
    """Turn 90 degrees clockwise."""
    command: Literal["RIGHT"] = "RIGHT"


class ReportCommand(_CommandBase):
    """Report location and facing."""
    command: Literal["REPORT"] = "REPORT"


Command = Annotated[
    Union[DropCommand, MoveCommand, LeftCommand, RightCommand, ReportCommand],
    Field(discriminator="command"),
]


def describe_command(command: Command) -> str:
    """Return the text logged for a command, e.g. 'MOVE' or 'DROP 3,4,NORTH'."""
    if isinstance(command, DropCommand):
        return f"{command.command} {command.x},{command.y},{command.direction.value}"
    return command.command


class LogRecord(BaseModel):
    """One status line for the log sink."""
    source: str = Field(..., description="Record tag, e.g. 'command' or 'tester'")
    index: int = Field(..., description="Sequence index the record belongs to")
    status: str = Field(..., description="Status text")


class TerminationDirective(BaseModel):
    """Asks the cluster controller to shut every process down."""
    directive: Literal["exit"] = Field(..., description="Always 'exit'")


class RunMode(str, Enum):
    """Run modes selectable by a control message."""
    FUNCTIONAL = "Functional"
    UNIT_HITTEST = "Unit HitTest"
    UNIT_DIRECTION = "Unit Direction"


class RunOptions(BaseModel):
    """
    Inbound control message.

    `key` stays a plain string so an unknown selector parses and can be ignored
    at dispatch instead of failing validation.
    """
    key: str = Field(..., description="Run mode selector")
    count: Optional[int] = Field(default=None, description="Command count for a functional run")

    @property
    def mode(self) -> Optional[RunMode]:
        try:
            return RunMode(self.key)
        except ValueError:
            return None


class Route(str, Enum):
    """Envelope targets routed by the hosting controller."""
    ROBOT = "robot"
    LOGGER = "logger"
    MASTER = "<MASTER>"


class Envelope(BaseModel):
    """Routing wrapper for one outbound message."""
    data: Union[Command, LogRecord, TerminationDirective] = Field(..., description="Payload")
    target: Route = Field(..., description="Destination collaborator")


class CheckResult(BaseModel):
    """Verdict for one self-check sample."""
    index: int = Field(..., description="Sample number")
    subject: str = Field(..., description="What was checked, e.g. a point or a turn")
    expected: str = Field(..., description="Result of the independent algorithm")
    actual: str = Field(..., description="Result of the reference algorithm")
    passed: bool = Field(..., description="True when both agree")

    @property
    def verdict(self) -> str:
        return "Success" if self.passed else "Failed"
