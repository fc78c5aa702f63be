"""Error taxonomy raised by the tournament services."""

from __future__ import annotations


class TournamentError(Exception):
    """Base class for failures surfaced verbatim to the caller."""

    status_code = 400
    code = "tournament_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(TournamentError):
    """Malformed input: bad status/value pairing, missing rule fields."""

    status_code = 400
    code = "validation_error"


class NotFoundError(TournamentError):
    status_code = 404
    code = "not_found"


class ConflictError(TournamentError):
    """Heats or results already exist for the target."""

    status_code = 409
    code = "conflict"


class BusinessRuleViolation(TournamentError):
    status_code = 422
    code = "business_rule_violation"
