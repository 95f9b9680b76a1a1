"""Error kinds raised by the simulation engine.

All of them are fatal for a run: the engine never catches them, the CLI
reports the message and exits.
"""


class SimulationError(Exception):
    """Base class for every fatal simulation error."""


class InvalidDateError(SimulationError, ValueError):
    """Malformed date string or a day index that does not round-trip."""


class InvalidAmountError(SimulationError, ValueError):
    """Non-numeric value where a number is required, or a malformed tax table."""


class InvariantViolation(SimulationError, RuntimeError):
    """Model invariant broken (re-purchase, negative balance, short paycheck, ...)."""
