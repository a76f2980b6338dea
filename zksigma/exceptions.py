"""
Common exception classes.
"""


class ConfigurationError(ValueError):
    """Protocol objects were constructed with unusable parameters."""


class InvalidSoundnessParamError(ConfigurationError):
    """Soundness parameter is not a positive multiple of 8, or 2^t >= q."""


class InvalidGroupError(ConfigurationError):
    """Group parameters do not validate."""


class SoundnessMismatchError(ConfigurationError):
    """Composed computations do not share the same soundness parameter."""


class InvalidInputError(ConfigurationError):
    """Input of the wrong kind was handed to a computation."""


class CheatAttemptError(Exception):
    """The other party deviated from the protocol syntax."""


class ChallengeLengthError(CheatAttemptError):
    """Challenge length does not match the soundness parameter."""


class CommunicationError(IOError):
    """Sending or receiving on a channel failed."""


class InvalidMessageError(TypeError):
    """A message of an unexpected kind was handed to a computation."""


class ProtocolStateError(RuntimeError):
    """Protocol steps were invoked out of order."""
