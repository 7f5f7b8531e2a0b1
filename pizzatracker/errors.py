"""Exceptions raised by the order store and the controller."""


class PizzaTrackerError(Exception):
    """Base class for every error this package raises on purpose."""


class ValidationError(PizzaTrackerError):
    """User input was rejected before reaching the store."""


class WriteError(PizzaTrackerError):
    """A mutation could not be durably committed by the backend."""


class PermissionDenied(PizzaTrackerError):
    """The current role is not allowed to perform the action."""


class OrderNotFound(PizzaTrackerError):
    def __init__(self, number):
        super().__init__(f"order {number} not found")
        self.number = number
