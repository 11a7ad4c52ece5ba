# engine/exceptions.py


class EngineError(Exception):
    """Base exception for all DRIP engine errors."""

    def __init__(self, message="An error occurred in the DRIP engine."):
        self.message = message
        super().__init__(self.message)


class InvalidEngineInputError(EngineError):
    """Raised when the engine is called with an invalid shape (options, window list)."""

    def __init__(self, message="Invalid input data provided to the engine."):
        self.message = message
        super().__init__(self.message)


class EngineCalculationError(EngineError):
    """Raised when a DRIP period or window fails for a reason other than bad input; bad data rows are skipped, never raised."""

    def __init__(self, message="DRIP window calculation failed unexpectedly."):
        self.message = message
        super().__init__(self.message)
