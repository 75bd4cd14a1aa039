# canteen/domain/errors.py


class CheckoutError(Exception):
    """Bazowy blad warunkow wstepnych checkoutu (do pokazania uzytkownikowi)."""


class EmptyCartError(CheckoutError):
    def __init__(self):
        super().__init__("Your cart is empty")


class MixedCanteenError(CheckoutError):
    def __init__(self, canteen_ids):
        self.canteen_ids = sorted(canteen_ids)
        super().__init__(
            "All items must be from the same canteen. "
            "Please split your order and check out each canteen separately."
        )


class UnauthenticatedError(CheckoutError):
    def __init__(self):
        super().__init__("Please sign in to place an order")


class CheckoutInProgressError(CheckoutError):
    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__("A checkout for this cart is already in progress")


class CheckoutUnavailableError(CheckoutError):
    def __init__(self):
        super().__init__("Checkout is temporarily unavailable, please try again")


class InvalidTransition(Exception):
    def __init__(self, current: str, target: str, reason: str | None = None):
        self.current = current
        self.target = target
        message = f"Cannot change order status from '{current}' to '{target}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class PersistenceError(Exception):
    """Opakowuje kazdy blad warstwy przechowywania dokumentow."""

    def __init__(self, operation: str, cause: Exception | None = None):
        self.operation = operation
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Persistence operation '{operation}' failed{detail}")


class NotFoundError(LookupError):
    pass
