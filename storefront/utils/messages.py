# storefront/utils/messages.py
from storefront.utils.settings import DEFAULT_LOCALE

MESSAGES = {
    "pl": {
        "validation_failed": "Niepoprawne dane zamowienia",
        "empty_cart": "Koszyk jest pusty",
        "invalid_quantity": "Ilosc musi byc wieksza niz 0",
        "total_mismatch": "Suma zamowienia nie zgadza sie z cenami produktow",
        "price_mismatch": "Cena produktu ulegla zmianie",
        "invalid_delivery_fee": "Niepoprawna oplata za dostawe",
        "invalid_payment_method": "Nieobslugiwana metoda platnosci",
        "invalid_status": "Niepoprawny status zamowienia",
        "incomplete_address": "Uzupelnij dane dostawy: adres, miasto, numer telefonu",
        "invalid_total": "Niepoprawna kwota zamowienia",
        "out_of_stock": "Brak wystarczajacej ilosci produktu w magazynie",
        "not_found": "Nie znaleziono zasobu",
        "order_not_found": "Zamowienie nie istnieje",
        "product_not_found": "Produkt nie istnieje",
        "address_not_found": "Adres dostawy nie istnieje",
        "invalid_transition": "Niedozwolona zmiana statusu zamowienia",
        "transition_conflict": "Zamowienie zostalo zmienione przez inna operacje, sprobuj ponownie",
        "order_creation_failed": "Nie udalo sie utworzyc zamowienia",
        "invoice_not_allowed": "Nie mozna wystawic faktury dla anulowanego zamowienia",
        "upstream_failure": "Usluga zewnetrzna jest niedostepna",
        "invoice_generation_failed": "Nie udalo sie wygenerowac faktury, sprobuj ponownie",
        "forbidden": "Brak dostepu",
        "unauthorized": "Wymagane uwierzytelnienie",
        "internal_error": "Wewnetrzny blad serwera",
    },
    "en": {
        "validation_failed": "Invalid order data",
        "empty_cart": "The cart is empty",
        "invalid_quantity": "Quantity must be greater than 0",
        "total_mismatch": "Order total does not match product prices",
        "price_mismatch": "Product price has changed",
        "invalid_delivery_fee": "Invalid delivery fee",
        "invalid_payment_method": "Unsupported payment method",
        "invalid_status": "Invalid order status",
        "incomplete_address": "Please complete delivery details: address, city, phone number",
        "invalid_total": "Invalid order amount",
        "out_of_stock": "Insufficient stock for product",
        "not_found": "Resource not found",
        "order_not_found": "Order not found",
        "product_not_found": "Product not found",
        "address_not_found": "Shipping address not found",
        "invalid_transition": "This order status change is not allowed",
        "transition_conflict": "The order was modified by another operation, please retry",
        "order_creation_failed": "Failed to create order",
        "invoice_not_allowed": "Cannot generate invoice for cancelled orders",
        "upstream_failure": "An external service is unavailable",
        "invoice_generation_failed": "Failed to generate invoice, please retry",
        "forbidden": "Access denied",
        "unauthorized": "Authentication required",
        "internal_error": "Internal server error",
    },
}


def pick_locale(accept_language: str | None) -> str:
    # "en-US,en;q=0.9,pl;q=0.8" -> pierwszy obslugiwany jezyk
    if accept_language:
        for part in accept_language.split(","):
            lang = part.split(";")[0].strip().lower()[:2]
            if lang in MESSAGES:
                return lang
    return DEFAULT_LOCALE if DEFAULT_LOCALE in MESSAGES else "pl"


def translate(key: str, locale: str | None = None) -> str:
    catalog = MESSAGES.get(locale or DEFAULT_LOCALE, MESSAGES["pl"])
    return catalog.get(key) or catalog["internal_error"]
