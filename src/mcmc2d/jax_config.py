"""
JAX Configuration - MUST be imported before any JAX imports.

This module sets environment variables for JAX configuration including:
- 64-bit floats, so autodiff densities agree with the float64 samplers
- Quiet XLA C++ logging on CPU-only hosts
"""
import os

# --- PRECISION ---
# Leapfrog and Metropolis arithmetic is done in Python floats (float64);
# densities evaluated through JAX must match that precision.
os.environ.setdefault("JAX_ENABLE_X64", "True")

# --- LOGGING ---
# Suppress CUDA/XLA C++ warnings (GPU interconnect, NUMA, cuDNN factories)
os.environ.setdefault("TF_CPP_MIN_LOG_LEVEL", "2")

# If JAX was imported before this module, the environment variable is too late.
import jax  # noqa: E402

jax.config.update("jax_enable_x64", True)
