# storefront/domain/errors.py


class NotFoundError(LookupError):
    pass


class InvalidTransitionError(ValueError):
    pass


class PaymentGatewayError(RuntimeError):
    pass


class ConcurrencyConflictError(RuntimeError):
    pass


class AlreadyExistsError(ValueError):
    pass
