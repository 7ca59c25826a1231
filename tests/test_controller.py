"""
Tests for the multi-chain controller.

Run with: pytest tests/test_controller.py -v
"""

import logging
import types

import numpy as np
import pytest

from mcmc2d import ChainSpec, MultiChainController, SamplerType
from mcmc2d.mcmc.backend import ChainState, IterationResult
from mcmc2d.mcmc.gibbs import GibbsSampler
from mcmc2d.mcmc.hmc import HMCSampler
from mcmc2d.mcmc.types import ParticleState, Point


def _two_chain_controller(oracle, sampler_type=SamplerType.HMC, burn_in=10):
    return MultiChainController(
        density=oracle,
        params={'epsilon': 0.2, 'L': 10},
        chain_specs=[
            ChainSpec(sampler_type, (0.0, 0.0), seed=42),
            ChainSpec(sampler_type, (1.0, 1.0), seed=43),
        ],
        burn_in=burn_in,
    )


class TestConstruction:

    def test_default_single_hmc_chain(self, quadratic_oracle):
        controller = MultiChainController(quadratic_oracle)
        assert len(controller.chains) == 1
        assert isinstance(controller.chains[0].sampler, HMCSampler)
        assert controller.chains[0].particle == ParticleState.at((0.0, 0.0))
        assert controller.burn_in == 10
        assert controller.iteration == 0

    def test_mixed_samplers(self, quadratic_oracle):
        controller = MultiChainController(quadratic_oracle, chain_specs=[
            ChainSpec(SamplerType.HMC, seed=1),
            ChainSpec('gibbs', (1.0, 1.0), seed=2),
        ])
        assert isinstance(controller.chains[0].sampler, HMCSampler)
        assert isinstance(controller.chains[1].sampler, GibbsSampler)

    def test_too_many_chains(self, quadratic_oracle):
        with pytest.raises(ValueError, match="At most 2"):
            MultiChainController(quadratic_oracle, chain_specs=[ChainSpec('hmc')] * 3)

    def test_invalid_params(self, quadratic_oracle):
        with pytest.raises(ValueError, match="epsilon"):
            MultiChainController(quadratic_oracle, params={'epsilon': 0.0})

    def test_negative_burn_in(self, quadratic_oracle):
        with pytest.raises(ValueError, match="burn_in"):
            MultiChainController(quadratic_oracle, burn_in=-1)

    def test_from_config(self, quadratic_oracle):
        controller = MultiChainController.from_config({
            'density': quadratic_oracle,
            'sampler_type': 'gibbs',
            'second_chain': True,
            'seed': 7,
            'seed_2': 8,
            'width': 2.0,
            'burn_in': 5,
        })
        assert len(controller.chains) == 2
        assert all(isinstance(c.sampler, GibbsSampler) for c in controller.chains)
        assert controller.chains[1].spec.initial_position == (1.0, 1.0)
        assert controller.chains[0].sampler.width == 2.0
        assert controller.burn_in == 5

    def test_from_config_invalid(self):
        with pytest.raises(ValueError, match="Unknown sampler type"):
            MultiChainController.from_config({'sampler_type': 'nuts'})


class TestRunning:

    def test_requires_density(self):
        controller = MultiChainController()
        with pytest.raises(RuntimeError, match="No density"):
            controller.run(5)

    def test_negative_steps(self, quadratic_oracle):
        with pytest.raises(ValueError):
            MultiChainController(quadratic_oracle).iter_steps(-1)

    def test_run_updates_counters(self, quadratic_oracle):
        controller = _two_chain_controller(quadratic_oracle)
        last = controller.run(50)

        assert isinstance(last, IterationResult)
        assert last.iteration == 50
        assert controller.iteration == 50
        for chain in controller.chains:
            assert chain.accepted_count + chain.rejected_count == 50
            assert len(chain.trajectory) == 11

    def test_run_zero(self, quadratic_oracle):
        controller = MultiChainController(quadratic_oracle)
        assert controller.run(0) is None
        assert controller.iteration == 0

    def test_iter_steps_is_cooperative(self, quadratic_oracle):
        controller = _two_chain_controller(quadratic_oracle)
        steps = controller.iter_steps(10)
        assert isinstance(steps, types.GeneratorType)
        assert controller.iteration == 0

        first = next(steps)
        assert first.iteration == 1
        assert len(first.results) == 2
        assert controller.iteration == 1

        # Stopping early keeps what already ran
        steps.close()
        assert controller.iteration == 1

    def test_trajectory_replaced_not_accumulated(self, quadratic_oracle):
        controller = MultiChainController(quadratic_oracle, params={'L': 4},
                                          chain_specs=[ChainSpec('hmc', seed=3)])
        for result in controller.iter_steps(5):
            assert controller.trajectories[0] == result.results[0].trajectory
            assert len(controller.trajectories[0]) == 5

    def test_accepted_samples_appended(self, quadratic_oracle):
        controller = MultiChainController(quadratic_oracle, chain_specs=[ChainSpec('hmc', seed=3)])
        accepted = []
        for result in controller.iter_steps(30):
            if result.results[0].accepted:
                accepted.append(result.results[0].q)
        assert controller.chains[0].samples == accepted

    def test_gibbs_accepts_every_iteration(self, quadratic_oracle):
        controller = _two_chain_controller(quadratic_oracle, SamplerType.GIBBS)
        controller.run(25)
        for chain in controller.chains:
            assert chain.accepted_count == 25
            assert chain.rejected_count == 0
            assert chain.acceptance_rate == 1.0
            assert len(chain.trajectory) == 3

    def test_same_seeds_reproduce(self, quadratic_oracle):
        a = _two_chain_controller(quadratic_oracle)
        b = _two_chain_controller(quadratic_oracle)
        a.run(40)
        b.run(40)
        for ca, cb in zip(a.chains, b.chains):
            assert ca.samples == cb.samples

    def test_oracle_failure_propagates(self, failing_oracle, caplog):
        controller = MultiChainController(failing_oracle, chain_specs=[ChainSpec('hmc', seed=1)])
        with caplog.at_level(logging.ERROR, logger='mcmc2d'):
            with pytest.raises(ValueError, match="undefined"):
                controller.run(3)
        assert controller.iteration == 0
        assert "Density evaluation failed" in caplog.text


class TestReset:

    def test_reset_restores_state(self, quadratic_oracle):
        controller = _two_chain_controller(quadratic_oracle)
        controller.run(20)
        first_samples = [list(c.samples) for c in controller.chains]

        controller.reset()
        assert controller.iteration == 0
        assert controller.density is quadratic_oracle
        for chain in controller.chains:
            assert chain.samples == []
            assert chain.rejected_count == 0
            assert chain.trajectory == ()
            assert chain.particle.q == Point(*chain.spec.initial_position)

        controller.run(20)
        assert [c.samples for c in controller.chains] == first_samples

    def test_set_density_resets(self, quadratic_oracle):
        controller = MultiChainController(quadratic_oracle, chain_specs=[ChainSpec('hmc', seed=1)])
        controller.run(5)
        controller.set_density(quadratic_oracle)
        assert controller.iteration == 0
        assert controller.chains[0].samples == []

    def test_set_sampler_type_clears(self, quadratic_oracle):
        controller = _two_chain_controller(quadratic_oracle)
        controller.run(5)
        controller.set_sampler_type('gibbs', index=1)

        assert isinstance(controller.chains[0].sampler, HMCSampler)
        assert isinstance(controller.chains[1].sampler, GibbsSampler)
        assert controller.chains[1].spec.seed == 43
        assert all(c.samples == [] for c in controller.chains)

        controller.set_sampler_type(SamplerType.GIBBS)
        assert all(isinstance(c.sampler, GibbsSampler) for c in controller.chains)

    def test_set_initial_position_on_reset(self, quadratic_oracle):
        controller = MultiChainController(quadratic_oracle, chain_specs=[ChainSpec('hmc', seed=1)])
        controller.set_initial_position((2.0, -2.0))
        assert controller.chains[0].particle.q == Point(0.0, 0.0)
        controller.reset()
        assert controller.chains[0].particle.q == Point(2.0, -2.0)

    def test_set_seed(self, quadratic_oracle):
        a = MultiChainController(quadratic_oracle, chain_specs=[ChainSpec('hmc', seed=1)])
        b = MultiChainController(quadratic_oracle, chain_specs=[ChainSpec('hmc', seed=99)])
        b.set_seed(1)
        a.run(10)
        b.run(10)
        assert a.chains[0].samples == b.chains[0].samples

    def test_set_params_propagates(self, quadratic_oracle):
        controller = _two_chain_controller(quadratic_oracle)
        controller.set_params(epsilon=0.05, L=3)
        assert controller.params['epsilon'] == 0.05
        for chain in controller.chains:
            assert chain.sampler.epsilon == 0.05
            assert chain.sampler.L == 3
        with pytest.raises(ValueError):
            controller.set_params(L=-1)


class TestChains:

    def test_add_and_remove_chain(self, quadratic_oracle):
        controller = MultiChainController(quadratic_oracle, chain_specs=[ChainSpec('gibbs', seed=1)])
        chain = controller.add_chain()
        assert isinstance(chain, ChainState)
        assert chain.spec.sampler_type == SamplerType.GIBBS
        assert chain.spec.initial_position == (1.0, 1.0)

        with pytest.raises(ValueError, match="At most"):
            controller.add_chain()

        spec = controller.remove_chain(1)
        assert spec.sampler_type == SamplerType.GIBBS
        assert len(controller.chains) == 1
        with pytest.raises(ValueError, match="only chain"):
            controller.remove_chain(0)

    def test_bad_index(self, quadratic_oracle):
        controller = MultiChainController(quadratic_oracle)
        with pytest.raises(IndexError):
            controller.set_seed(1, index=1)


class TestDiagnostics:

    def test_burn_in_does_not_discard(self, quadratic_oracle):
        controller = _two_chain_controller(quadratic_oracle, burn_in=10)
        controller.run(30)
        chain = controller.chains[0]
        assert controller.chain_samples(0) == chain.samples[10:]
        assert controller.chain_samples(0, burn_in=0) == chain.samples
        assert len(chain.samples) == chain.accepted_count

    def test_rhat_requires_two_chains(self, quadratic_oracle):
        controller = MultiChainController(quadratic_oracle, chain_specs=[ChainSpec('hmc', seed=1)])
        controller.run(50)
        assert controller.gelman_rubin() is None

    def test_rhat_requires_samples_past_burn_in(self, quadratic_oracle):
        controller = _two_chain_controller(quadratic_oracle, burn_in=10)
        controller.run(5)
        assert controller.gelman_rubin() is None

    def test_rhat_and_ess_after_run(self, quadratic_oracle):
        controller = _two_chain_controller(quadratic_oracle)
        controller.run(500)
        rhat = controller.gelman_rubin()
        ess = controller.ess()
        assert isinstance(rhat, Point)
        assert max(rhat) < 1.1
        assert ess.x > 100
        assert ess.y > 100

    def test_summary(self, quadratic_oracle, caplog):
        controller = _two_chain_controller(quadratic_oracle)
        controller.run(100)

        with caplog.at_level(logging.INFO, logger='mcmc2d'):
            summary = controller.print_summary()

        assert summary['iteration'] == 100
        assert summary['burn_in'] == 10
        assert len(summary['chains']) == 2
        first = summary['chains'][0]
        assert first['accepted'] + first['rejected'] == 100
        assert first['n_kept'] == first['accepted'] - 10
        assert np.all(np.isfinite(first['mean']))
        assert "Convergence Diagnostics" in caplog.text
        assert "Acceptance Rates" in caplog.text


class TestNamedDensity:

    def test_density_by_name(self):
        controller = MultiChainController('gaussian', chain_specs=[ChainSpec('hmc', seed=42)])
        controller.run(20)
        assert controller.chains[0].accepted_count > 0

    def test_unknown_density(self):
        with pytest.raises(KeyError, match="Unknown density"):
            MultiChainController('no_such_density')


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
