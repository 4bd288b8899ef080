"""
Channel and model metadata.
"""

import logging
from typing import List, Sequence

from attrs import define, field

from pixelcomp.errors import InvalidArgument

logger = logging.getLogger(__name__)


def _check_range(instance, attribute, value):
    if not instance.minimum < value:
        raise InvalidArgument(
            "invalid channel range: min (%r) must be less than max (%r)"
            % (instance.minimum, value)
        )


def _non_empty(instance, attribute, value):
    if not value:
        raise InvalidArgument("'%s' cannot be empty" % attribute.name)


@define(frozen=True)
class ChannelMeta:
    """
    Metadata of a single channel.

    .. py:attribute:: name

        Display name of the channel, e.g. ``H`` or ``Cb``.

    .. py:attribute:: minimum
    .. py:attribute:: maximum

        Valid range, inclusive.

    .. py:attribute:: unit

        Unit suffix, e.g. ``°`` or ``%``.
    """

    name: str = field(validator=_non_empty)
    minimum: float = 0.0
    maximum: float = field(default=1.0, validator=_check_range)
    unit: str = ""
    description: str = ""

    def validate(self, value: float) -> None:
        """
        :raises InvalidArgument: If the value lies outside of the range.
        """
        if not (self.minimum <= value <= self.maximum):
            raise InvalidArgument(
                "value %r is outside valid range [%r, %r] for channel %s"
                % (value, self.minimum, self.maximum, self.name)
            )

    def clamp(self, value: float) -> float:
        return min(self.maximum, max(self.minimum, value))


@define(frozen=True)
class ModelMeta:
    """
    Metadata of a color model: a name, a description and its channels.
    """

    name: str = field(validator=_non_empty)
    description: str = field(validator=_non_empty)
    channels: tuple = field(converter=tuple, validator=_non_empty)

    @property
    def channel_names(self) -> List[str]:
        return [channel.name for channel in self.channels]

    def validate(self, values: Sequence[float]) -> None:
        """
        Validate a sequence of channel values against this model.

        :raises InvalidArgument: If the number of values or any value is wrong.
        """
        if len(values) != len(self.channels):
            raise InvalidArgument(
                "%s expects %d values, got %d"
                % (self.name, len(self.channels), len(values))
            )
        for channel, value in zip(self.channels, values):
            channel.validate(value)

    def doc(self) -> str:
        """Markdown documentation of the model."""
        lines = [
            "# %s" % self.name,
            "_%s_" % self.description,
            "",
            "| Channel | Min | Max | Unit | Description |",
            "| --- | --- | --- | --- | --- |",
        ]
        for channel in self.channels:
            lines.append(
                "| %s | %g | %g | %s | %s |"
                % (
                    channel.name,
                    channel.minimum,
                    channel.maximum,
                    channel.unit,
                    channel.description,
                )
            )
        return "\n".join(lines) + "\n"
