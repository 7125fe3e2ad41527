"""Domain exceptions."""


class InvalidInputError(ValueError):
    """Observations, tables or labels that cannot be evaluated."""
