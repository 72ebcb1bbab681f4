from __future__ import annotations


class DepgateError(Exception):
    """Base exception class for all depgate-specific errors.

    Missing modules, unmet versions and incompatible settings are not errors:
    they are reported as data. Exceptions in this hierarchy signal
    misconfiguration or integration mistakes.

    Attributes:
        message: Human-readable error message describing what went wrong.

    Example:
        ```python
        try:
            config = load_config()
        except DepgateError as e:
            logger.error(f"depgate error: {e.message}")
            sys.exit(1)
        ```
    """

    def __init__(self, message: str) -> None:
        """Initialize the DepgateError.

        Args:
            message: Human-readable error message.
        """
        self.message = message
        super().__init__(message)
