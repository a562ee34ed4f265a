"""
Tests for message schemas and outbound channels.

Tests verify:
- Command payloads carry x/y/direction only for DROP
- The command tag alone selects the variant when decoding
- Commands are immutable once built
- RunOptions accepts unknown keys and maps known ones to RunMode
- Envelopes serialize to the documented JSON shapes
- Outbound routes each target to its own channel
- StreamChannel writes one JSON line per envelope
"""

import io
import json

import pytest
from pydantic import ValidationError

from robot_harness.channels import (
    Outbound,
    RecordingChannel,
    StreamChannel,
    decode_envelope,
    encode_envelope,
)
from robot_harness.models import (
    CheckResult,
    CompassDirection,
    DropCommand,
    Envelope,
    LeftCommand,
    LogRecord,
    MoveCommand,
    Route,
    RunMode,
    RunOptions,
    TerminationDirective,
    describe_command,
)


class TestCommandSchema:
    """Test the Command union."""

    def test_drop_wire_shape(self):
        envelope = Envelope(
            data=DropCommand(x=3, y=4, direction=CompassDirection.NORTH, index=2),
            target=Route.ROBOT,
        )
        assert json.loads(encode_envelope(envelope)) == {
            "data": {"command": "DROP", "x": 3, "y": 4, "direction": "NORTH", "index": 2},
            "target": "robot",
        }

    def test_move_has_no_drop_fields(self):
        envelope = Envelope(data=MoveCommand(index=0), target=Route.ROBOT)
        assert json.loads(encode_envelope(envelope)) == {
            "data": {"command": "MOVE", "index": 0},
            "target": "robot",
        }

    def test_decode_selects_variant_by_tag(self):
        envelope = decode_envelope('{"data": {"command": "LEFT", "index": 1}, "target": "robot"}')
        assert isinstance(envelope.data, LeftCommand)
        assert envelope.data.index == 1
        assert envelope.target == Route.ROBOT

    def test_decode_drop_without_coordinates_fails(self):
        with pytest.raises(ValidationError):
            decode_envelope('{"data": {"command": "DROP", "direction": "EAST"}, "target": "robot"}')

    def test_decode_unknown_command_fails(self):
        with pytest.raises(ValidationError):
            decode_envelope('{"data": {"command": "JUMP"}, "target": "robot"}')

    def test_commands_are_frozen(self):
        command = MoveCommand(index=3)
        with pytest.raises(ValidationError):
            command.index = 4

    def test_describe_command(self):
        assert describe_command(MoveCommand()) == "MOVE"
        assert describe_command(
            DropCommand(x=0, y=7, direction=CompassDirection.WEST)
        ) == "DROP 0,7,WEST"


class TestOtherPayloads:
    """Test log records, directives and run options."""

    def test_log_record_envelope(self):
        envelope = decode_envelope(
            '{"data": {"source": "tester", "index": 5, "status": "?,?,?"}, "target": "logger"}'
        )
        assert envelope.data == LogRecord(source="tester", index=5, status="?,?,?")

    def test_termination_directive_envelope(self):
        envelope = Envelope(data=TerminationDirective(directive="exit"), target=Route.MASTER)
        assert json.loads(encode_envelope(envelope)) == {
            "data": {"directive": "exit"},
            "target": "<MASTER>",
        }
        assert isinstance(decode_envelope(encode_envelope(envelope)).data, TerminationDirective)

    def test_unknown_target_fails(self):
        with pytest.raises(ValidationError):
            decode_envelope('{"data": {"directive": "exit"}, "target": "nobody"}')

    @pytest.mark.parametrize("key,mode", [
        ("Functional", RunMode.FUNCTIONAL),
        ("Unit HitTest", RunMode.UNIT_HITTEST),
        ("Unit Direction", RunMode.UNIT_DIRECTION),
        ("Something Else", None),
    ])
    def test_run_options_mode(self, key, mode):
        assert RunOptions(key=key).mode == mode

    def test_run_options_count_is_optional(self):
        options = RunOptions.model_validate_json('{"key": "Functional"}')
        assert options.count is None

    def test_check_result_verdict(self):
        ok = CheckResult(index=0, subject="p", expected="True", actual="True", passed=True)
        bad = CheckResult(index=1, subject="p", expected="True", actual="False", passed=False)
        assert ok.verdict == "Success"
        assert bad.verdict == "Failed"


class TestChannels:
    """Test outbound routing."""

    def test_outbound_routes_by_target(self):
        robot, log, master = RecordingChannel(), RecordingChannel(), RecordingChannel()
        outbound = Outbound(robot=robot, logger=log, master=master)

        outbound.send(MoveCommand(index=0), Route.ROBOT)
        outbound.send(LogRecord(source="command", index=0, status="MOVE"), Route.LOGGER)
        outbound.send(TerminationDirective(directive="exit"), Route.MASTER)

        assert [e.target for e in robot.envelopes] == [Route.ROBOT]
        assert [e.target for e in log.envelopes] == [Route.LOGGER]
        assert [e.target for e in master.envelopes] == [Route.MASTER]

    @pytest.mark.parametrize("target", list(Route))
    def test_every_route_reaches_exactly_one_channel(self, target):
        channels = {route: RecordingChannel() for route in Route}
        outbound = Outbound(
            robot=channels[Route.ROBOT],
            logger=channels[Route.LOGGER],
            master=channels[Route.MASTER],
        )

        outbound.send(LogRecord(source="tester", index=0, status="?,?,?"), target)

        assert {route: len(c.envelopes) for route, c in channels.items()} == {
            route: int(route == target) for route in Route
        }

    def test_single_shares_one_channel(self):
        channel = RecordingChannel()
        outbound = Outbound.single(channel)
        outbound.send(MoveCommand(), Route.ROBOT)
        outbound.send(TerminationDirective(directive="exit"), Route.MASTER)
        assert [e.target for e in channel.envelopes] == [Route.ROBOT, Route.MASTER]

    def test_drain_empties_recording(self):
        channel = RecordingChannel()
        Outbound.single(channel).send(MoveCommand(), Route.ROBOT)
        assert len(channel.drain()) == 1
        assert channel.drain() == []

    def test_stream_channel_writes_json_lines(self):
        stream = io.StringIO()
        outbound = Outbound.single(StreamChannel(stream))
        outbound.send(MoveCommand(index=0), Route.ROBOT)
        outbound.send(TerminationDirective(directive="exit"), Route.MASTER)

        lines = stream.getvalue().splitlines()
        assert len(lines) == 2
        assert json.loads(lines[0]) == {"data": {"command": "MOVE", "index": 0}, "target": "robot"}
        assert json.loads(lines[1]) == {"data": {"directive": "exit"}, "target": "<MASTER>"}
