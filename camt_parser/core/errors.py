"""
Document-level errors.
"""


class Camt053ParserError(ValueError):
    """Raised when a document fails a precondition and no statements can be produced."""
