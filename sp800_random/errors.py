# sp800_random/errors.py
"""
Error taxonomy for DRBG construction and generation.

Every error here is security relevant: callers get them directly and no
component catches them to carry on with weaker output.
"""


class SP800RandomError(Exception):
    """Base class for all errors raised while building or using a DRBG."""
    pass


class ConfigurationError(SP800RandomError, ValueError):
    """
    The requested configuration cannot be honoured, e.g. a security strength
    higher than the chosen digest/cipher can provide, or fewer entropy bits
    than the security strength needs. Raised at build time, never downgraded.
    """
    pass


class EntropyUnavailable(SP800RandomError, IOError):
    """The entropy source could not deliver the bits requested."""
    pass


class MechanismFault(SP800RandomError, RuntimeError):
    """
    The underlying mechanism is in an inconsistent state (for example it still
    asks for a reseed straight after being reseeded). The generator that raised
    it must not be used again.
    """
    pass
