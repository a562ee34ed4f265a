"""
Outbound channels.

The harness never talks to a process directly. It sends Envelopes through one
Channel per route (robot, logger, master); the host decides what a channel is:
- RecordingChannel keeps envelopes in memory (HTTP host, tests)
- StreamChannel writes one JSON envelope per line to a text stream (stdio host)

Envelopes are serialized with pydantic, one message per transmission.
"""

import logging
from dataclasses import dataclass
from typing import Protocol, TextIO, Union

from .models import Command, Envelope, LogRecord, Route, TerminationDirective

logger = logging.getLogger(__name__)


def encode_envelope(envelope: Envelope) -> str:
    """Serialize an envelope to JSON text, omitting absent optional fields."""
    return envelope.model_dump_json(exclude_none=True)


def decode_envelope(text: str) -> Envelope:
    """
    Parse JSON text into an Envelope.

    Raises:
        pydantic.ValidationError: if the text does not match the schema
    """
    return Envelope.model_validate_json(text)


class Channel(Protocol):
    def send(self, envelope: Envelope) -> None:
        ...


class RecordingChannel:
    """Collects envelopes in emission order."""

    def __init__(self):
        self.envelopes: list[Envelope] = []

    def send(self, envelope: Envelope) -> None:
        self.envelopes.append(envelope)

    def drain(self) -> list[Envelope]:
        """Return everything recorded so far and start over."""
        drained, self.envelopes = self.envelopes, []
        return drained


class StreamChannel:
    """Writes each envelope as one JSON line and flushes."""

    def __init__(self, stream: TextIO):
        self.stream = stream

    def send(self, envelope: Envelope) -> None:
        self.stream.write(encode_envelope(envelope) + "\n")
        self.stream.flush()


@dataclass
class Outbound:
    """One channel per route."""
    robot: Channel
    logger: Channel
    master: Channel

    @classmethod
    def single(cls, channel: Channel) -> "Outbound":
        """Route every target through the same channel."""
        return cls(robot=channel, logger=channel, master=channel)

    def send(self, data: Union[Command, LogRecord, TerminationDirective], target: Route) -> None:
        envelope = Envelope(data=data, target=target)
        logger.debug("-> %s %s", target.value, envelope.data)
        if target == Route.ROBOT:
            self.robot.send(envelope)
        elif target == Route.LOGGER:
            self.logger.send(envelope)
        else:
            self.master.send(envelope)
