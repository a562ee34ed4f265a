"""
Test Orchestrator Module

Drives the differential test of a robot implementation:
1. A control message selects a run mode
2. Functional mode builds a random command sequence ending in REPORT
3. Each command is forwarded to the robot under test, applied to the local
   reference robot, and both the command and the reference status are logged
4. Two self-checks cross-validate independently written algorithms
   (ray casting vs. box containment, vector turns vs. a discrete turn table)
5. Every run ends with an exit directive to the cluster controller

Checks are advisory: a mismatch becomes a "Failed" log record and the run
carries on. Nothing here raises on a mismatch.
"""

import logging
import random
from typing import Optional

from pydantic import ValidationError

from .channels import Outbound
from .config import DROP_COORD_RANGE, HIT_SAMPLE_RANGE, get_default_command_count, get_unit_samples
from .directions import LEFT_OF, RIGHT_OF, to_direction, turn_left, turn_right
from .geometry import Vector
from .models import (
    CheckResult,
    Command,
    CompassDirection,
    DropCommand,
    LeftCommand,
    LogRecord,
    MoveCommand,
    ReportCommand,
    RightCommand,
    Route,
    RunMode,
    RunOptions,
    TerminationDirective,
    describe_command,
)
from .robot import RobotState
from .world import build_table_bounds, build_table_polygon

logger = logging.getLogger(__name__)

SOURCE_DESIRED = "DESIRED"
SOURCE_COMMAND = "command"
SOURCE_TESTER = "tester"
SOURCE_UNIT_HITTEST = "unit-hittest"
SOURCE_UNIT_DIRECTION = "unit-direction"


class Tester:
    """
    Differential tester holding one reference robot for its lifetime.

    Settings not passed in are read from config here, so a bad environment
    fails at construction rather than in the middle of a run.

    Args:
        outbound: Channels for the robot, logger and master routes
        robot: Reference robot; defaults to one on the standard table
        rng: Random source; defaults to an unseeded random.Random
        default_count: Command count for a functional run that names none
        unit_samples: Samples drawn by each self-check (at least 1)

    Raises:
        RuntimeError: if a setting read from the environment is invalid
        ValueError: if default_count or unit_samples is below 1
    """

    __test__ = False

    def __init__(
        self,
        outbound: Outbound,
        robot: Optional[RobotState] = None,
        rng: Optional[random.Random] = None,
        default_count: Optional[int] = None,
        unit_samples: Optional[int] = None,
    ):
        self.outbound = outbound
        self.robot = robot if robot is not None else RobotState(build_table_polygon())
        self.rng = rng if rng is not None else random.Random()
        self.default_count = default_count if default_count is not None else get_default_command_count()
        self.unit_samples = unit_samples if unit_samples is not None else get_unit_samples()
        if self.default_count < 1 or self.unit_samples < 1:
            raise ValueError(
                f"default_count and unit_samples must be at least 1, "
                f"got {self.default_count} and {self.unit_samples}"
            )

    # ------------------------------------------------------------------
    # Control messages
    # ------------------------------------------------------------------

    def handle_message(self, text: str) -> None:
        """Parse one JSON control message and run it; malformed text is dropped."""
        try:
            options = RunOptions.model_validate_json(text)
        except ValidationError as exc:
            logger.warning("ignoring malformed control message %r: %s", text[:200], exc)
            return
        self.handle(options)

    def handle(self, options: RunOptions) -> None:
        """Run the mode selected by `options`; an unknown key is a no-op."""
        mode = options.mode
        logger.info("control message key=%r count=%s", options.key, options.count)

        if mode == RunMode.UNIT_DIRECTION:
            self.direction_and_rotation_unit_test()
        elif mode == RunMode.UNIT_HITTEST:
            self.hit_unit_tests()
        elif mode == RunMode.FUNCTIONAL:
            count = options.count if options.count is not None else self.default_count
            self.start(count)
        else:
            logger.debug("unrecognized run mode %r ignored", options.key)

    # ------------------------------------------------------------------
    # Functional run
    # ------------------------------------------------------------------

    def random_command(self) -> Command:
        """Pick one of the five command kinds with equal probability."""
        choice = self.rng.randrange(5)
        if choice == 0:
            low, high = DROP_COORD_RANGE
            return DropCommand(
                x=self.rng.randint(low, high),
                y=self.rng.randint(low, high),
                direction=self.rng.choice(list(CompassDirection)),
            )
        if choice == 1:
            return MoveCommand()
        if choice == 2:
            return LeftCommand()
        if choice == 3:
            return RightCommand()
        return ReportCommand()

    def build_commands(self, count: int) -> list[Command]:
        """
        Build `count` indexed commands; the last one is always REPORT.

        A count below 1 is treated as 1.
        """
        count = max(count, 1)
        commands: list[Command] = [
            self.random_command().model_copy(update={"index": i})
            for i in range(count - 1)
        ]
        commands.append(ReportCommand(index=count - 1))
        return commands

    def start(self, count: int) -> list[Command]:
        """
        Run a functional test of `count` commands.

        Emission order: the desired-count record, then for every command the
        forwarded command, its "command" record and its "tester" status
        record, then the exit directive.

        Returns:
            The generated command sequence
        """
        commands = self.build_commands(count)
        logger.info("functional run: %d commands", len(commands))

        self._log(SOURCE_DESIRED, len(commands), "")

        for command in commands:
            self.outbound.send(command, Route.ROBOT)
            self.robot.execute(command)
            self.log_command(command)
            self.log_status(command.index)

        logger.info("functional run finished: status=%s", self.robot.status)
        self.exit()
        return commands

    def log_command(self, command: Command) -> None:
        self._log(SOURCE_COMMAND, command.index, describe_command(command))

    def log_status(self, index: int) -> None:
        self._log(SOURCE_TESTER, index, self.robot.status)

    # ------------------------------------------------------------------
    # Self-checks
    # ------------------------------------------------------------------

    def hit_unit_tests(self) -> list[CheckResult]:
        """
        Compare ray-casting containment with box containment on random points.

        Points are drawn from a range wider than the table on both axes. The
        polygon edges sit 0.5 outside the box, so integer points never land on
        a polygon edge and the two tests should always agree.

        Returns:
            One CheckResult per sampled point
        """
        polygon = self.robot.polygon
        bounds = build_table_bounds()
        low, high = HIT_SAMPLE_RANGE
        samples = self.unit_samples
        logger.info(
            "hit-test self-check: %d random points against [%g-%g]x[%g-%g]",
            samples, bounds.min_x, bounds.max_x, bounds.min_y, bounds.max_y,
        )

        results: list[CheckResult] = []
        for i in range(samples):
            point = Vector(self.rng.randint(low, high), self.rng.randint(low, high))
            expected = bounds.hit_test(point)
            actual = polygon.hit_test(point)
            result = CheckResult(
                index=i,
                subject=str(point),
                expected=str(expected),
                actual=str(actual),
                passed=expected == actual,
            )
            results.append(result)
            self._log(
                SOURCE_UNIT_HITTEST,
                i,
                f"hit test for {result.subject} table: {result.expected} "
                f"ray caster: {result.actual} {result.verdict}",
            )

        self._summarize("hit-test", results)
        self.exit()
        return results

    def direction_and_rotation_unit_test(self) -> list[CheckResult]:
        """
        Turn a vector and a discrete label in lockstep and compare them.

        Starting from NORTH, each step randomly turns left or right, applying
        the rotation to the vector and the turn table to the label.

        Returns:
            One CheckResult per turn
        """
        vector = Vector(0, 1)
        label = CompassDirection.NORTH
        samples = self.unit_samples
        logger.info(
            "direction self-check: begin %s -> %s, %d random turns",
            vector, to_direction(vector).value, samples,
        )

        results: list[CheckResult] = []
        for i in range(samples):
            if self.rng.random() < 0.5:
                turn = "left"
                vector = turn_left(vector)
                label = LEFT_OF[label]
            else:
                turn = "right"
                vector = turn_right(vector)
                label = RIGHT_OF[label]

            derived = to_direction(vector)
            result = CheckResult(
                index=i,
                subject=f"turn {turn} {vector}",
                expected=label.value,
                actual=derived.value,
                passed=derived == label,
            )
            results.append(result)
            self._log(
                SOURCE_UNIT_DIRECTION,
                i,
                f"{result.subject} vector: {result.actual} "
                f"table: {result.expected} {result.verdict}",
            )

        self._summarize("direction", results)
        self.exit()
        return results

    # ------------------------------------------------------------------
    # Outbound helpers
    # ------------------------------------------------------------------

    def exit(self) -> None:
        """Ask the cluster controller to terminate the cluster."""
        self.outbound.send(TerminationDirective(directive="exit"), Route.MASTER)

    def _log(self, source: str, index: int, status: str) -> None:
        self.outbound.send(LogRecord(source=source, index=index, status=status), Route.LOGGER)

    def _summarize(self, name: str, results: list[CheckResult]) -> None:
        failed = [r for r in results if not r.passed]
        if failed:
            logger.warning(
                "%s self-check: %d/%d samples failed (first: %s)",
                name, len(failed), len(results), failed[0].subject,
            )
        else:
            logger.info("%s self-check: all %d samples passed", name, len(results))
