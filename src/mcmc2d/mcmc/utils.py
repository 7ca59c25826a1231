from ..settings import DEFAULT_BURN_IN, DEFAULT_INITIAL_POSITIONS, SETTING_DEFAULTS


def clean_config(config):
    """
    Cleans a controller config and sets defaults.
    All config keys use lowercase with underscores, except the step count 'L'.

    Returns a new dict; the caller's dict is not modified.
    """
    config = dict(config or {})

    # Sampler settings shared by all chains
    for name, default in SETTING_DEFAULTS.items():
        config.setdefault(str(name), default)

    # Chain 1
    config.setdefault('sampler_type', 'hmc')
    config.setdefault('initial_position', DEFAULT_INITIAL_POSITIONS[0])
    config.setdefault('seed', None)

    # Optional chain 2; inherits the first chain's sampler unless overridden
    config.setdefault('second_chain', False)
    config.setdefault('initial_position_2', DEFAULT_INITIAL_POSITIONS[1])
    config.setdefault('seed_2', None)
    if config.get('sampler_type_2') is None:
        config['sampler_type_2'] = config['sampler_type']

    config.setdefault('burn_in', DEFAULT_BURN_IN)
    config.setdefault('density', None)

    return config
