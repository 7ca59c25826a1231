"""
Numerical integrator for Hamiltonian dynamics.

Leapfrog (Stormer-Verlet) with unit mass:
    p_{t+ε/2} = p_t - (ε/2) * ∇U(q_t)
    q_{t+ε}   = q_t + ε * p_{t+ε/2}
    p_{t+ε}   = p_{t+ε/2} - (ε/2) * ∇U(q_{t+ε})

The scheme is symplectic and time-reversible: integrating forward, negating
the momentum and integrating forward again returns to the starting point
up to round-off.
"""

from typing import Callable, List, Sequence, Tuple

from .types import Point

GradientFn = Callable[[float, float], Sequence[float]]


def leapfrog_step(
    q: Point,
    p: Point,
    epsilon: float,
    grad_u: GradientFn,
) -> Tuple[Point, Point]:
    """
    Single leapfrog step.

    Args:
        q: Position
        p: Momentum
        epsilon: Step size
        grad_u: Gradient of the potential, (x, y) -> (dU/dx, dU/dy)

    Returns:
        (q_new, p_new)
    """
    half = 0.5 * epsilon

    # Half step momentum
    gx, gy = grad_u(q.x, q.y)
    p_half = Point(p.x - half * gx, p.y - half * gy)

    # Full step position
    q_new = Point(q.x + epsilon * p_half.x, q.y + epsilon * p_half.y)

    # Half step momentum at the new position
    gx, gy = grad_u(q_new.x, q_new.y)
    p_new = Point(p_half.x - half * gx, p_half.y - half * gy)

    return q_new, p_new


def integrate(
    q: Point,
    p: Point,
    epsilon: float,
    num_steps: int,
    grad_u: GradientFn,
) -> Tuple[Point, Point, List[Point]]:
    """
    Run num_steps leapfrog steps, recording every position visited.

    Returns:
        (q_final, p_final, trajectory) where trajectory has num_steps + 1
        points, starting with q.
    """
    trajectory = [q]
    for _ in range(num_steps):
        q, p = leapfrog_step(q, p, epsilon, grad_u)
        trajectory.append(q)
    return q, p, trajectory
