# sp800_random/config.py
"""
Builder configuration and its environment-variable defaults.
"""
import os
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigurationError

# Defaults can be overridden through the environment, falling back to 256 bits.
SECURITY_STRENGTH_ENV_VAR = "SP800_SECURITY_STRENGTH"
ENTROPY_BITS_ENV_VAR = "SP800_ENTROPY_BITS"
PREDICTION_RESISTANT_ENV_VAR = "SP800_PREDICTION_RESISTANT"

DEFAULT_SECURITY_STRENGTH = 256
DEFAULT_ENTROPY_BITS_REQUIRED = 256


def _int_from_env(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"Environment variable {name} must be an integer, got '{value}'.") from None


def default_security_strength() -> int:
    return _int_from_env(SECURITY_STRENGTH_ENV_VAR, DEFAULT_SECURITY_STRENGTH)


def default_entropy_bits_required() -> int:
    return _int_from_env(ENTROPY_BITS_ENV_VAR, DEFAULT_ENTROPY_BITS_REQUIRED)


def default_prediction_resistant() -> bool:
    return os.environ.get(PREDICTION_RESISTANT_ENV_VAR, "false").strip().lower() in ("1", "true", "yes", "on")


class BuilderConfig(BaseModel):
    """
    Immutable snapshot of a builder's configuration. One is taken on every
    build call and copied into the mechanism provider, so later setter calls
    never affect generators that were already built.
    """
    model_config = ConfigDict(frozen=True)

    personalization_string: Optional[bytes] = Field(
        default=None,
        description="Bytes mixed into instantiation to separate otherwise identical seeds.",
    )
    security_strength: int = Field(
        default_factory=default_security_strength,
        gt=0,
        description="Requested security strength in bits.",
    )
    entropy_bits_required: int = Field(
        default_factory=default_entropy_bits_required,
        gt=0,
        description="Bits of entropy each fetch from the entropy source must deliver.",
    )

    @property
    def personalization(self) -> bytes:
        """The personalization string, b'' when none was set."""
        return self.personalization_string or b""

    @classmethod
    def create(cls, **values) -> "BuilderConfig":
        """Builds a config, reporting invalid values as ConfigurationError."""
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid builder configuration: {e}") from e

    def check_entropy(self) -> None:
        """Each entropy fetch must carry at least the requested security strength."""
        if self.entropy_bits_required < self.security_strength:
            raise ConfigurationError(
                f"entropy_bits_required ({self.entropy_bits_required}) is lower than the "
                f"requested security strength ({self.security_strength}).")
