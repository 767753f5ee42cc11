from __future__ import annotations


class PTaxError(Exception):
    """Base class for calculator errors."""

    pass


class NotInitializedError(PTaxError):
    """Raised when a calculation is requested before reference data is loaded."""

    def __init__(self) -> None:
        super().__init__("Calculator not initialized. Call load() first.")


class UnknownStateError(PTaxError):
    """Raised when a state id is not present in the loaded state table."""

    def __init__(self, state_id: object) -> None:
        self.state_id = state_id
        super().__init__(f"State with ID {state_id} not found")


class DatasetError(PTaxError):
    """Raised when reference data cannot be loaded or a record is invalid."""

    pass
