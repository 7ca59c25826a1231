"""Gibbs sampler: alternate slice-sampling updates of x | y and y | x."""

from typing import Optional

from ..chain_specs import SamplerType
from ..error_handling import validate_sampler_params
from ..seeded_random import SeededRandom
from ..settings import SettingName, build_settings
from .slice import sample_slice
from .types import ZERO, DensityOracle, ParticleState, Point, StepResult


class GibbsSampler:
    """
    Coordinate-wise Gibbs kernel using univariate slice sampling.

    Every transition is accepted. The reported trajectory is the Manhattan
    path (x0, y0) -> (x1, y0) -> (x1, y1).

    Args:
        params: Optional partial settings; only 'width' is used. Shared HMC
                settings (epsilon, L) are stored but have no effect.
        seed: Integer seed, or None for a clock-derived seed
        rng: Pre-built random source; overrides seed when given
    """

    sampler_type = SamplerType.GIBBS

    def __init__(self, params=None, seed=None, rng: Optional[SeededRandom] = None):
        self.params = build_settings(params)
        validate_sampler_params(self.params)
        if rng is not None:
            self.rng = rng
        else:
            self.set_seed(seed)

    @property
    def seed(self):
        return self.rng.get_seed()

    @property
    def width(self) -> float:
        return float(self.params[SettingName.WIDTH.value])

    def set_params(self, **params):
        validate_sampler_params(params)
        self.params = {**self.params, **{k: v for k, v in params.items() if v is not None}}

    def set_seed(self, seed):
        self.rng = SeededRandom(seed)

    def step(self, state: ParticleState, oracle: DensityOracle) -> StepResult:
        x0, y0 = state.q

        # P(x | y) ∝ P(x, y)
        x1 = sample_slice(lambda x: oracle.get_log_probability(x, y0), x0, self.width, self.rng)
        # P(y | x) ∝ P(x, y), at the updated x
        y1 = sample_slice(lambda y: oracle.get_log_probability(x1, y), y0, self.width, self.rng)

        return StepResult(
            q=Point(x1, y1),
            p=ZERO,
            accepted=True,
            trajectory=(Point(x0, y0), Point(x1, y0), Point(x1, y1)),
        )

    def __repr__(self):
        return f"GibbsSampler(width={self.width}, seed={self.seed})"
