"""
Exception hierarchy for htmlblocks.

Recoverable conditions (no DOM root, anchors that are not http/https links)
are reported through return values, not exceptions. Everything here is a
configuration problem, a bad registry call or an internal logic defect.
"""


class HTMLBlocksError(Exception):
    """Base class for all htmlblocks errors."""


class ConfigError(HTMLBlocksError, ValueError):
    """Invalid configuration value or file."""


class BlockRenderMapError(ConfigError):
    """Block render map is malformed or lacks the 'unstyled' entry."""


class InvalidEntityError(HTMLBlocksError, ValueError):
    """Entity arguments rejected by the registry."""


class UnknownEntityError(HTMLBlocksError, KeyError):
    """Entity key not present in the registry."""


class InvariantViolation(HTMLBlocksError, AssertionError):
    """
    An internal invariant did not hold.

    This signals a defect in the traversal, never bad user input, so it is
    not caught anywhere inside the package.
    """


def invariant(condition: bool, message: str) -> None:
    """Raise InvariantViolation with message unless condition holds."""
    if not condition:
        raise InvariantViolation(message)
