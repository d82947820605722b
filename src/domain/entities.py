"""Entidades de dominio de la cooperativa: guías, facturas, asociados y deudas."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from src.domain.value_objects import USD, VES


class InvoiceStatus(Enum):
    """Estado maestro de una factura."""

    ACTIVA = "Activa"
    ANULADA = "Anulada"


class PaymentStatus(Enum):
    PAGADA = "Pagada"
    PENDIENTE = "Pendiente"


class ShippingStatus(Enum):
    PENDIENTE_DESPACHO = "Pendiente para Despacho"
    EN_TRANSITO = "En Tránsito"
    ENTREGADA = "Entregada"


class AsociadoStatus(Enum):
    ACTIVO = "Activo"
    INACTIVO = "Inactivo"
    SUSPENDIDO = "Suspendido"


class DebtStatus(Enum):
    """Estado de una línea de deuda de un asociado."""

    PENDIENTE = "Pendiente"
    PAGADO = "Pagado"  # Solo se alcanza mediante un recibo


PAYMENT_TYPES = ("flete-pagado", "flete-destino")
CLIENT_TYPES = ("persona", "empresa")


@dataclass(frozen=True, kw_only=True)
class Merchandise:
    """Una línea de mercancía de la guía. Dimensiones en cm, peso en kg."""

    quantity: int = 1
    weight: Decimal = Decimal("0")
    length: Decimal = Decimal("0")
    width: Decimal = Decimal("0")
    height: Decimal = Decimal("0")
    description: str = ""
    category_id: str = ""


@dataclass(frozen=True, kw_only=True)
class Client:
    id: str = ""
    id_number: str = ""  # RIF / Cédula
    client_type: str = "persona"
    name: str = ""
    phone: str = ""
    address: str = ""
    email: Optional[str] = None

    def __post_init__(self) -> None:
        if self.client_type not in CLIENT_TYPES:
            raise ValueError(f"client_type inválido: {self.client_type}")


@dataclass(frozen=True, kw_only=True)
class ShippingGuide:
    """
    Guía de envío: el registro facturable de un despacho.

    El valor declarado se deriva del peso facturable por el costo por kg y
    debe recalcularse cada vez que cambia la mercancía (ver
    ``financials.with_merchandise``).
    """

    guide_number: str
    date: date
    origin_office_id: str = ""
    destination_office_id: str = ""
    sender: Optional[Client] = None
    receiver: Optional[Client] = None
    merchandise: tuple[Merchandise, ...] = ()
    shipping_type_id: str = ""
    payment_method_id: str = ""
    has_insurance: bool = False
    declared_value: Decimal = Decimal("0")
    insurance_percentage: Decimal = Decimal("0")
    payment_type: str = "flete-pagado"
    payment_currency: str = VES
    has_discount: bool = False
    discount_percentage: Decimal = Decimal("0")

    def __post_init__(self) -> None:
        if self.payment_type not in PAYMENT_TYPES:
            raise ValueError(f"payment_type inválido: {self.payment_type}")
        if self.payment_currency not in (VES, USD):
            raise ValueError(f"payment_currency inválida: {self.payment_currency}")


@dataclass(frozen=True, kw_only=True)
class Financials:
    """Montos derivados de una guía. Nunca se persisten por separado."""

    freight: Decimal = Decimal("0")
    insurance_cost: Decimal = Decimal("0")
    handling: Decimal = Decimal("0")
    discount: Decimal = Decimal("0")
    subtotal: Decimal = Decimal("0")
    ipostel: Decimal = Decimal("0")
    iva: Decimal = Decimal("0")
    igtf: Decimal = Decimal("0")
    total: Decimal = Decimal("0")


@dataclass(frozen=True, kw_only=True)
class Invoice:
    id: str
    invoice_number: str
    control_number: str
    date: date
    client_name: str
    client_id_number: str
    total_amount: Decimal
    guide: ShippingGuide
    status: InvoiceStatus = InvoiceStatus.ACTIVA
    payment_status: PaymentStatus = PaymentStatus.PENDIENTE
    shipping_status: ShippingStatus = ShippingStatus.PENDIENTE_DESPACHO
    vehicle_id: Optional[str] = None
    remesa_id: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.status is InvoiceStatus.ACTIVA


@dataclass(frozen=True, kw_only=True)
class Asociado:
    id: str
    codigo: str
    nombre: str
    cedula: str
    fecha_ingreso: Optional[date] = None
    telefono: str = ""
    direccion: str = ""
    status: AsociadoStatus = AsociadoStatus.ACTIVO

    def __post_init__(self) -> None:
        if not self.nombre or not self.nombre.strip():
            raise ValueError("nombre no puede estar vacío")


@dataclass(frozen=True, kw_only=True)
class PagoAsociado:
    """
    Línea de deuda de un asociado.

    Pasa a ``Pagado`` únicamente a través de un recibo, y no puede
    eliminarse mientras un recibo la referencie.
    """

    id: str
    asociado_id: str
    concepto: str
    monto_bs: Decimal
    fecha_vencimiento: date
    cuotas: str = ""
    monto_usd: Optional[Decimal] = None
    status: DebtStatus = DebtStatus.PENDIENTE
    recibo_id: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.concepto or not self.concepto.strip():
            raise ValueError("concepto no puede estar vacío")
        if self.monto_bs < 0:
            raise ValueError(f"monto_bs no puede ser negativo: {self.monto_bs}")

    @property
    def is_pending(self) -> bool:
        return self.status is DebtStatus.PENDIENTE


@dataclass(frozen=True, kw_only=True)
class DetallePago:
    """Una forma de pago dentro de un recibo."""

    tipo: str
    monto: Decimal
    banco: Optional[str] = None
    referencia: Optional[str] = None


@dataclass(frozen=True, kw_only=True)
class ReciboPagoAsociado:
    id: str
    comprobante_numero: str
    asociado_id: str
    fecha_pago: date
    monto_total_bs: Decimal
    tasa_bcv: Decimal
    pagos_ids: tuple[str, ...]
    detalles_pago: tuple[DetallePago, ...] = ()

    @property
    def total_detalles(self) -> Decimal:
        return sum((d.monto for d in self.detalles_pago), Decimal("0"))


@dataclass(frozen=True, kw_only=True)
class Expense:
    """Gasto con los campos fiscales del Libro de Compras (SENIAT)."""

    id: str
    date: date
    description: str
    category: str
    amount: Decimal  # Monto TOTAL
    status: str = "Pagado"
    office_id: Optional[str] = None
    supplier_rif: Optional[str] = None
    supplier_name: Optional[str] = None
    invoice_number: Optional[str] = None
    control_number: Optional[str] = None
    taxable_base: Optional[Decimal] = None
    vat_amount: Optional[Decimal] = None
    payment_method_id: Optional[str] = None


@dataclass(frozen=True, kw_only=True)
class Office:
    id: str
    name: str
    address: str = ""
    phone: str = ""


@dataclass(frozen=True, kw_only=True)
class Vehicle:
    id: str
    asociado_id: str
    placa: str
    modelo: str = ""
    status: str = "Disponible"


@dataclass(frozen=True, kw_only=True)
class InventoryItem:
    """Mercancía en almacén derivada de facturas activas no entregadas."""

    id: str
    sku: str
    name: str
    description: str
    stock: int
    shipping_status: ShippingStatus
    unit: str = "unidad"
    invoice_id: Optional[str] = None
    invoice_number: Optional[str] = None
    weight: Optional[Decimal] = None


@dataclass(frozen=True, kw_only=True)
class User:
    id: str
    name: str
    username: str = ""
    role_id: str = ""


@dataclass(frozen=True, kw_only=True)
class AuditLog:
    id: str
    timestamp: datetime
    user_id: str
    user_name: str
    action: str
    details: str
    target_id: Optional[str] = None
