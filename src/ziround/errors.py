class DomainViolation(ValueError):
    """A value/kind combination that an integral variable cannot represent."""


class RangeViolation(ValueError):
    """A value outside the variable's current bounds."""


class RoundingConsistencyError(RuntimeError):
    """A computed rounding step broke a variable invariant."""
