"""Exceptions raised by the copter simulation and training code.

None of these are transient: they point at bad initial data, bad wiring
of layer sizes / genomes, or a hyperparameter combination that cannot work.
"""


class CopterError(Exception):
    """Base for all ai_copter exceptions."""

    pass


class ConstructionError(CopterError, ValueError):
    """Malformed initial data (cave samples, layer sizes, ...)."""

    pass


class DimensionError(CopterError, ValueError):
    """Vector / matrix / genome length mismatch."""

    pass


class DegenerateInputError(CopterError, ValueError):
    """Input for which the result would be NaN or infinite."""

    pass


class ResourceExhaustionError(CopterError, ValueError):
    """More unique samples or pairs requested than exist."""

    pass


class ConfigurationError(CopterError, ValueError):
    """Invalid or unusable configuration values."""

    pass
