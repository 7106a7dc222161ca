# storefront/domain/errors.py
"""
Taksonomia bledow domeny zamowien.

Kazdy blad niesie stabilny `code` (klucz do katalogu komunikatow) oraz
opcjonalne `entity_id`. Tekst przyczyny (np. blad bazy) trafia tylko do logow,
nigdy do odpowiedzi dla klienta.
"""


class StorefrontError(Exception):
    code = "internal_error"

    def __init__(self, detail: str = "", entity_id: str | None = None):
        super().__init__(detail or self.code)
        self.detail = detail
        self.entity_id = entity_id


class ValidationError(StorefrontError):
    code = "validation_failed"

    def __init__(self, detail: str = "", entity_id: str | None = None, code: str | None = None):
        super().__init__(detail, entity_id)
        if code:
            self.code = code


class OutOfStockError(ValidationError):
    code = "out_of_stock"


class NotFoundError(StorefrontError):
    code = "not_found"


class OrderNotFoundError(NotFoundError):
    code = "order_not_found"


class ProductNotFoundError(NotFoundError):
    code = "product_not_found"


class AddressNotFoundError(NotFoundError):
    code = "address_not_found"


class InvalidTransitionError(StorefrontError):
    code = "invalid_transition"

    def __init__(self, current: str, target: str, entity_id: str | None = None):
        super().__init__(f"{current} -> {target} is not allowed", entity_id)
        self.current = current
        self.target = target


class TransitionConflictError(StorefrontError):
    """Warunkowy update statusu nie trafil w zaden wiersz (ktos byl szybszy)."""

    code = "transition_conflict"


class CompensatedCreationFailure(StorefrontError):
    code = "order_creation_failed"


class InvoiceNotAllowedError(StorefrontError):
    code = "invoice_not_allowed"


class UpstreamFailure(StorefrontError):
    code = "upstream_failure"


class InvoiceGenerationFailed(UpstreamFailure):
    code = "invoice_generation_failed"
    retryable = True
