"""
Sampler settings configuration.

This module defines the canonical names and default values of every tunable
sampler setting, and merges user-supplied partial settings over the defaults.

Shared hyperparameters (epsilon, L, width) are owned by the controller and
pushed to every sampler; each sampler reads only the settings it uses.

To add a new setting:
1. Add it to SettingName
2. Add default value to SETTING_DEFAULTS
3. Read it in the sampler: self.params[SettingName.NEW_SETTING]
"""

from enum import Enum


class SettingName(str, Enum):
    """Canonical keys for sampler settings."""
    EPSILON = 'epsilon'        # HMC leapfrog step size
    L = 'L'                    # HMC number of leapfrog steps per transition
    WIDTH = 'width'            # Slice sampler initial bracket width (Gibbs)

    def __str__(self):
        return self.value


# Default values for each setting
SETTING_DEFAULTS = {
    SettingName.EPSILON: 0.1,
    SettingName.L: 10,
    SettingName.WIDTH: 1.0,
}

# Slice sampler iteration caps
MAX_STEP_OUT = 100          # per direction, stepping-out phase
MAX_SHRINK_STEPS = 1000     # shrinkage phase, before falling back to x0

# Controller defaults
DEFAULT_BURN_IN = 10
MAX_CHAINS = 2
DEFAULT_INITIAL_POSITIONS = ((0.0, 0.0), (1.0, 1.0))


def build_settings(params=None):
    """
    Merge partial settings over the defaults.

    Args:
        params: Optional dict of setting name -> value. Keys may be plain
                strings ('epsilon') or SettingName members. Unknown keys are
                kept so samplers can ignore what they do not use.

    Returns:
        Dict keyed by plain string setting names.
    """
    settings = {str(k): v for k, v in SETTING_DEFAULTS.items()}
    for key, value in (params or {}).items():
        if value is None:
            continue
        settings[str(key)] = value
    return settings
