"""Exception taxonomy for prompt refinement.

Every message is intended to be shown to the user as-is; the refinement
service copies ``str(exc)`` into the ``error`` field of its result.
"""


class RefinementError(Exception):
    """Base class for all refinement failures."""

    pass


class ValidationError(RefinementError):
    """Malformed, empty or oversized input, or an out-of-enum preference."""

    pass


class ModerationError(RefinementError):
    """Input contains one or more blocked terms.

    Attributes:
        terms: The matched block-list terms, in block-list order.
    """

    def __init__(self, terms: list[str]):
        self.terms = list(terms)
        super().__init__(f"Content contains inappropriate terms: {', '.join(self.terms)}")


class ExternalServiceError(RefinementError):
    """The completion service call failed (transport, status or payload)."""

    pass


class CatastrophicFailure(RefinementError):
    """Even the fallback prompt could not be built from the raw input."""

    pass
