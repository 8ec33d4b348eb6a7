"""
Exception hierarchy for ResourceCompetition.

All errors raised by the package derive from ResourceCompetitionError, so
callers can catch the whole family at once.
"""


class ResourceCompetitionError(Exception):
    """Base class for all package errors."""
    pass


class InvalidParameter(ResourceCompetitionError, ValueError):
    """A species, resource or simulation parameter is out of range."""
    pass


class UnknownInteractionLaw(ResourceCompetitionError, ValueError):
    """The requested interaction law is not one of the defined laws."""
    pass


class ConfigError(ResourceCompetitionError):
    """Custom exception for configuration related errors."""
    pass


class IntegrationFailure(ResourceCompetitionError, RuntimeError):
    """The ODE integrator failed or produced a non-finite state."""
    pass


class SteadyStateNonConvergence(ResourceCompetitionError, RuntimeError):
    """The steady-state solver did not find a physical equilibrium."""
    pass
