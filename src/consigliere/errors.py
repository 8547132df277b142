"""Error taxonomy shared by the validator, assistant and HTTP layer."""

from __future__ import annotations

from typing import Sequence


class ConsigliereError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(ConsigliereError):
    """Caller-correctable request problem (unknown team or player, empty query)."""

    status_code = 400


class MalformedProposal(InvalidInput):
    """Trade partition does not conserve players across teams."""

    def __init__(self, problems: Sequence[str]):
        self.problems = list(problems)
        super().__init__("Malformed trade proposal: " + "; ".join(self.problems))


class ServiceUnavailable(ConsigliereError):
    """Data store or text generator could not be reached; safe to retry."""

    status_code = 503


class RateLimitExceeded(ConsigliereError):
    status_code = 429

    def __init__(self, identity: str, retry_after: float):
        super().__init__("Rate limit exceeded. Please try again later.")
        self.identity = identity
        self.retry_after = retry_after
