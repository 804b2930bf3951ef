"""Exceptions raised for malformed tree input."""


class StructuralError(ValueError):
    """A tree or flat sequence that cannot describe a valid hierarchy.

    Raised for duplicate ids, parent references to ids that do not exist,
    and parent cycles.
    """
