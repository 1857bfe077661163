"""Exceptions raised while building or evaluating expression trees."""


class MemocalcError(Exception):
    """Base class for memocalc errors."""


class DivisionError(MemocalcError, ZeroDivisionError):
    """Modulo by zero."""


class InvalidExponentError(MemocalcError, ValueError):
    """Exponent is negative or does not fit the supported exponent range."""


class MalformedTreeError(MemocalcError, TypeError):
    """An expression tree violates its structural invariants.

    Raised for internal nodes with a missing or non-node child and for leaves
    whose value is not an integer.
    """
