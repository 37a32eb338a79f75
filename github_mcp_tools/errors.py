"""Exceptions raised inside operations and translated by the gateway."""


class GatewayError(Exception):
    """Base class for failures the gateway knows how to classify."""


class InvalidArgumentError(GatewayError):
    """A required argument is missing or a supplied one is malformed."""


class InvalidStateError(GatewayError):
    """The remote resource is not in a state that allows the operation."""


class ClientConnectionError(GatewayError):
    """The GitHub client could not be created or refused the credential."""
