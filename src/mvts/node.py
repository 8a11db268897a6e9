"""Adapter presenting a multivariate series as a single-output dataflow node."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from mvts.data.fusion import merge
from mvts.data.series import MultivariateTimeSeries, TimeSeries
from mvts.errors import InvalidArgumentError

OUTPUT_NAME = "TimeSeries"


@dataclass(frozen=True)
class NodeDescription:
    """What a host needs to display and wire a node."""

    label: str
    short_label: str
    output_names: tuple[str, ...] = (OUTPUT_NAME,)
    num_inputs: int = 0
    num_outputs: int = 1
    tooltip: str | None = None


@dataclass
class SeriesNode:
    """Terminal producer wrapping a :class:`MultivariateTimeSeries`.

    The node accepts no inputs and exposes the series on output socket 0.
    """

    series: MultivariateTimeSeries
    tooltip: str | None = field(default=None)

    @classmethod
    def from_sources(
        cls,
        sources: Sequence[TimeSeries],
        impute_missing: bool = False,
        *,
        title: str | None = None,
    ) -> "SeriesNode":
        return cls(series=merge(sources, impute_missing, title=title))

    def describe(self) -> NodeDescription:
        return NodeDescription(
            label=self.series.describe(),
            short_label=self.series.short_description(),
            tooltip=self.tooltip,
        )

    def produce(self) -> MultivariateTimeSeries:
        return self.series

    def get_output(self, socket: int) -> MultivariateTimeSeries:
        if socket != 0:
            raise InvalidArgumentError("series nodes only have output socket 0")
        return self.produce()

    def output_types(self, socket: int) -> list[type]:
        return [MultivariateTimeSeries]

    def set_input(self, socket: int, item: Any) -> bool:
        # nothing can be connected upstream of a series
        return False


__all__ = ["NodeDescription", "OUTPUT_NAME", "SeriesNode"]
