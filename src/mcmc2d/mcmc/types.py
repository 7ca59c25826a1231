"""
MCMC Data Structures and Type Definitions.

This module contains the core value types passed between the samplers,
the controller and downstream consumers:
- Point: an (x, y) pair used for positions, momenta and per-axis diagnostics
- ParticleState: the (q, p) phase-space state carried between transitions
- StepResult: the outcome of one Markov transition
- DensityOracle: protocol for the external log-density provider

All types are immutable. A chain replaces its ParticleState after every
transition instead of mutating a shared cell.
"""

from dataclasses import dataclass
from typing import Mapping, NamedTuple, Protocol, Sequence, Tuple, Union


class Point(NamedTuple):
    """A pair of reals on the two sampled axes."""
    x: float
    y: float

    def __neg__(self):
        return Point(-self.x, -self.y)

    def squared_norm(self) -> float:
        return self.x * self.x + self.y * self.y


ZERO = Point(0.0, 0.0)

PointLike = Union[Point, Tuple[float, float], Sequence[float], Mapping[str, float]]


def as_point(value: PointLike) -> Point:
    """Coerce a Point, (x, y) pair or {'x': .., 'y': ..} mapping to a Point."""
    if isinstance(value, Point):
        return value
    if isinstance(value, Mapping):
        return Point(float(value['x']), float(value['y']))
    x, y = value
    return Point(float(x), float(y))


@dataclass(frozen=True)
class ParticleState:
    """Phase-space state (q, p) owned by one chain between steps."""
    q: Point
    p: Point = ZERO

    @classmethod
    def at(cls, position: PointLike) -> 'ParticleState':
        """Particle at rest at the given position."""
        return cls(q=as_point(position), p=ZERO)


@dataclass(frozen=True)
class StepResult:
    """
    Outcome of a single Markov transition.

    Attributes:
        q: Position after the transition (the start position if rejected)
        p: Momentum after the transition ((0, 0) if rejected or for Gibbs)
        accepted: Whether the proposal was accepted
        trajectory: Positions visited during the transition, start included.
                    HMC returns L + 1 points even on rejection; Gibbs returns
                    the 3-point path (x0, y0) -> (x1, y0) -> (x1, y1).
    """
    q: Point
    p: Point
    accepted: bool
    trajectory: Tuple[Point, ...]

    @property
    def state(self) -> ParticleState:
        """Particle state to carry into the next transition."""
        return ParticleState(q=self.q, p=self.p)


class DensityOracle(Protocol):
    """
    Unnormalized log-density over the plane.

    Implementations must be pure functions of (x, y). Exceptions raised for
    domain errors propagate through the samplers unchanged.
    """

    def get_log_probability(self, x: float, y: float) -> float:
        ...

    def get_log_probability_gradient(self, x: float, y: float) -> Sequence[float]:
        ...
