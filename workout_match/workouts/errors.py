"""Workout input error types.

Standard error codes:
- INVALID_BLOCKS: Builder payload is not a list of block objects
- INVALID_BLOCK: A builder block is missing required fields or has bad values
"""


class PlanFormatError(RuntimeError):
    """Raised when a plan payload cannot be converted into plan entries.

    Attributes:
        code: Error code (e.g., "INVALID_BLOCKS", "INVALID_BLOCK")
        details: List of error detail strings
    """

    def __init__(self, code: str, details: list[str]):
        self.code = code
        self.details = details
        super().__init__(f"{code}: {details}")
