# app/domain/errors.py
"""
Bledy domenowe rdzenia sklepu.
Routery tlumacza je na odpowiedzi HTTP, serwisy ich nie ponawiaja.
"""


class ShopError(Exception):
    """Bazowy blad domeny."""


class NotFound(ShopError):
    """Encja (koszyk, wariant, zamowienie, platnosc, stan magazynu) nie istnieje."""


class InsufficientStock(ShopError):
    """Rezerwacja nie moze byc spelniona (on_hand - reserved < qty)."""

    def __init__(self, variant_id, requested: int, available: int):
        super().__init__(
            f"insufficient stock for variant {variant_id}: "
            f"requested {requested}, available {available}"
        )
        self.variant_id = variant_id
        self.requested = requested
        self.available = available


class NegativeStock(ShopError):
    """Korekta zeszlaby z on_hand ponizej zera (albo ponizej reserved)."""


class EmptyCart(ShopError):
    """Checkout pustego koszyka."""


class CartClosed(ShopError):
    """Koszyk po checkoucie jest niezmienny."""


class InvalidInput(ShopError):
    """Niepoprawne dane wejsciowe (ilosci, duplikaty slug/sku)."""


class ProviderVerificationFailed(ShopError):
    """Podpis HMAC od dostawcy platnosci sie nie zgadza."""


class PaymentProviderError(ShopError):
    """Wywolanie API dostawcy platnosci nie powiodlo sie."""


class TransientIO(ShopError):
    """Chwilowa niedostepnosc bazy/sieci - cala operacje mozna bezpiecznie powtorzyc."""
