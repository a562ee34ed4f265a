"""
Reference Robot Module

Implements the robot state machine the harness uses as its oracle.

The robot starts Invalid (no location, no direction). The first DROP that
lands inside the table makes it Valid, and it stays Valid for its lifetime.
Every command that would leave the table, and every non-DROP command issued
while Invalid, is a silent no-op.

Location and direction are Vectors; a turn is a multiplication by a unit
vector, so the direction keeps magnitude 1 without any axis/sign bookkeeping.
"""

import logging
from typing import Callable, Optional

from .directions import to_direction, to_vector, turn_left, turn_right
from .geometry import Polygon, Vector, format_number
from .models import (
    Command,
    CompassDirection,
    DropCommand,
    LeftCommand,
    MoveCommand,
    ReportCommand,
    RightCommand,
)

logger = logging.getLogger(__name__)

INVALID_STATUS = "?,?,?"


class RobotState:
    """Reference robot bound to a table polygon."""

    def __init__(
        self,
        polygon: Polygon,
        on_report: Optional[Callable[[str], None]] = None,
    ):
        self.polygon = polygon
        self.on_report = on_report
        self.location: Optional[Vector] = None
        self.direction: Optional[Vector] = None

    @property
    def invalid(self) -> bool:
        return self.location is None or self.direction is None

    def drop(self, x: int, y: int, direction: CompassDirection) -> None:
        """Place the robot at (x, y) if that point is on the table."""
        target = Vector(x, y)
        if not self.polygon.hit_test(target):
            logger.debug("drop to %s rejected: off table", target)
            return
        self.location = target
        self.direction = to_vector(direction)

    def move(self) -> None:
        """Step one unit forward unless the step would leave the table."""
        if self.invalid:
            return
        candidate = self.location + self.direction
        if not self.polygon.hit_test(candidate):
            logger.debug("move to %s rejected: off table", candidate)
            return
        self.location = candidate

    def left(self) -> None:
        if self.invalid:
            return
        self.direction = turn_left(self.direction)

    def right(self) -> None:
        if self.invalid:
            return
        self.direction = turn_right(self.direction)

    def report(self) -> Optional[str]:
        """
        Report location and nearest compass label.

        Returns:
            Report text "x,y,LABEL", or None while Invalid
        """
        if self.invalid:
            return None
        text = "{},{},{}".format(
            format_number(self.location.r),
            format_number(self.location.i),
            to_direction(self.direction).value,
        )
        logger.info("Tester Report: %s", text)
        if self.on_report is not None:
            self.on_report(text)
        return text

    def execute(self, command: Command) -> None:
        """
        Apply one command.

        Raises:
            TypeError: if `command` is not one of the Command variants
        """
        if isinstance(command, DropCommand):
            self.drop(command.x, command.y, command.direction)
        elif isinstance(command, MoveCommand):
            self.move()
        elif isinstance(command, LeftCommand):
            self.left()
        elif isinstance(command, RightCommand):
            self.right()
        elif isinstance(command, ReportCommand):
            self.report()
        else:
            raise TypeError(f"Unknown command type: {type(command).__name__}")

    @property
    def status(self) -> str:
        """
        Status snapshot for the log sink.

        "?,?,?" while Invalid, otherwise "x,y,LABEL,dr,di". The raw direction
        components are included so drift shows up even when two vectors round
        to the same label.
        """
        if self.invalid:
            return INVALID_STATUS
        return ",".join([
            format_number(self.location.r),
            format_number(self.location.i),
            to_direction(self.direction).value,
            format_number(self.direction.r),
            format_number(self.direction.i),
        ])
