"""Value objects del dominio."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

CENTS = Decimal("0.01")

VES = "VES"
USD = "USD"


@dataclass(frozen=True)
class Money:
    """Value object para montos financieros. Siempre Decimal, nunca float."""

    amount: Decimal
    currency: str = VES

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            try:
                object.__setattr__(self, "amount", Decimal(str(self.amount)))
            except (InvalidOperation, ValueError) as e:
                raise ValueError(f"Monto inválido: {self.amount}") from e
        if self.currency not in (VES, USD):
            raise ValueError(f"Moneda no soportada: {self.currency}")

    def __add__(self, other: "Money") -> "Money":
        if self.currency != other.currency:
            raise ValueError(f"No se puede sumar {self.currency} con {other.currency}")
        return Money(amount=self.amount + other.amount, currency=self.currency)

    def convert(self, bcv_rate: Decimal) -> "Money":
        """Convierte VES↔USD con la tasa BCV (Bs. por dólar), redondeando a céntimos."""
        if bcv_rate <= 0:
            raise ValueError(f"Tasa BCV inválida: {bcv_rate}")
        if self.currency == VES:
            return Money(amount=(self.amount / bcv_rate).quantize(CENTS, ROUND_HALF_UP), currency=USD)
        return Money(amount=(self.amount * bcv_rate).quantize(CENTS, ROUND_HALF_UP), currency=VES)
