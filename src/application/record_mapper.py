"""Conversión entre registros JSON persistidos (camelCase) y entidades de dominio."""

from __future__ import annotations

from datetime import UTC, date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from src.domain.entities import (
    Asociado,
    AsociadoStatus,
    AuditLog,
    Client,
    DebtStatus,
    DetallePago,
    Expense,
    InventoryItem,
    Invoice,
    InvoiceStatus,
    Merchandise,
    Office,
    PagoAsociado,
    PaymentStatus,
    ReciboPagoAsociado,
    ShippingGuide,
    ShippingStatus,
    Vehicle,
)


class RecordMapper:
    def __init__(self, date_format: str = "%d/%m/%Y") -> None:
        self.date_format = date_format

    # ── Clientes ──────────────────────────────────────────────────────

    def client_from_record(self, row: dict) -> Client:
        return Client(
            id=self._clean_string(row.get("id")),
            id_number=self._clean_string(row.get("idNumber")),
            client_type=self._clean_string(row.get("clientType")) or "persona",
            name=self._clean_string(row.get("name")),
            phone=self._clean_string(row.get("phone")),
            address=self._clean_string(row.get("address")),
            email=self._optional_string(row.get("email")),
        )

    def client_to_record(self, client: Client) -> dict:
        return self._compact(
            {
                "id": client.id,
                "idNumber": client.id_number,
                "clientType": client.client_type,
                "name": client.name,
                "phone": client.phone,
                "address": client.address,
                "email": client.email,
            }
        )

    # ── Guías y facturas ──────────────────────────────────────────────

    def merchandise_from_record(self, row: dict) -> Merchandise:
        return Merchandise(
            quantity=int(self._parse_money(row.get("quantity", 1))),
            weight=self._parse_money(row.get("weight", 0)),
            length=self._parse_money(row.get("length", 0)),
            width=self._parse_money(row.get("width", 0)),
            height=self._parse_money(row.get("height", 0)),
            description=self._clean_string(row.get("description")),
            category_id=self._clean_string(row.get("categoryId")),
        )

    def merchandise_to_record(self, item: Merchandise) -> dict:
        return {
            "quantity": item.quantity,
            "weight": self._money_out(item.weight),
            "length": self._money_out(item.length),
            "width": self._money_out(item.width),
            "height": self._money_out(item.height),
            "description": item.description,
            "categoryId": item.category_id,
        }

    def guide_from_record(self, row: dict) -> ShippingGuide:
        sender = row.get("sender")
        receiver = row.get("receiver")
        return ShippingGuide(
            guide_number=self._clean_string(row.get("guideNumber")),
            date=self._parse_date(row["date"]),
            origin_office_id=self._clean_string(row.get("originOfficeId")),
            destination_office_id=self._clean_string(row.get("destinationOfficeId")),
            sender=self.client_from_record(sender) if sender else None,
            receiver=self.client_from_record(receiver) if receiver else None,
            merchandise=tuple(
                self.merchandise_from_record(m) for m in row.get("merchandise") or []
            ),
            shipping_type_id=self._clean_string(row.get("shippingTypeId")),
            payment_method_id=self._clean_string(row.get("paymentMethodId")),
            has_insurance=bool(row.get("hasInsurance", False)),
            declared_value=self._parse_money(row.get("declaredValue", 0)),
            insurance_percentage=self._parse_money(row.get("insurancePercentage", 0)),
            payment_type=self._clean_string(row.get("paymentType")) or "flete-pagado",
            payment_currency=self._clean_string(row.get("paymentCurrency")).upper() or "VES",
            has_discount=bool(row.get("hasDiscount", False)),
            discount_percentage=self._parse_money(row.get("discountPercentage", 0)),
        )

    def guide_to_record(self, guide: ShippingGuide) -> dict:
        return {
            "guideNumber": guide.guide_number,
            "date": guide.date.isoformat(),
            "originOfficeId": guide.origin_office_id,
            "destinationOfficeId": guide.destination_office_id,
            "sender": self.client_to_record(guide.sender) if guide.sender else {},
            "receiver": self.client_to_record(guide.receiver) if guide.receiver else {},
            "merchandise": [self.merchandise_to_record(m) for m in guide.merchandise],
            "shippingTypeId": guide.shipping_type_id,
            "paymentMethodId": guide.payment_method_id,
            "hasInsurance": guide.has_insurance,
            "declaredValue": self._money_out(guide.declared_value),
            "insurancePercentage": self._money_out(guide.insurance_percentage),
            "paymentType": guide.payment_type,
            "paymentCurrency": guide.payment_currency,
            "hasDiscount": guide.has_discount,
            "discountPercentage": self._money_out(guide.discount_percentage),
        }

    def invoice_from_record(self, row: dict) -> Invoice:
        return Invoice(
            id=self._clean_string(row["id"]),
            invoice_number=self._clean_string(row.get("invoiceNumber")),
            control_number=self._clean_string(row.get("controlNumber")),
            date=self._parse_date(row["date"]),
            client_name=self._clean_string(row.get("clientName")),
            client_id_number=self._clean_string(row.get("clientIdNumber")),
            total_amount=self._parse_money(row.get("totalAmount", 0)),
            guide=self.guide_from_record(row["guide"]),
            status=InvoiceStatus(row.get("status", InvoiceStatus.ACTIVA.value)),
            payment_status=PaymentStatus(row.get("paymentStatus", PaymentStatus.PENDIENTE.value)),
            shipping_status=ShippingStatus(
                row.get("shippingStatus", ShippingStatus.PENDIENTE_DESPACHO.value)
            ),
            vehicle_id=self._optional_string(row.get("vehicleId")),
            remesa_id=self._optional_string(row.get("remesaId")),
        )

    def invoice_to_record(self, invoice: Invoice) -> dict:
        return self._compact(
            {
                "id": invoice.id,
                "invoiceNumber": invoice.invoice_number,
                "controlNumber": invoice.control_number,
                "date": invoice.date.isoformat(),
                "clientName": invoice.client_name,
                "clientIdNumber": invoice.client_id_number,
                "totalAmount": self._money_out(invoice.total_amount),
                "status": invoice.status.value,
                "paymentStatus": invoice.payment_status.value,
                "shippingStatus": invoice.shipping_status.value,
                "guide": self.guide_to_record(invoice.guide),
                "vehicleId": invoice.vehicle_id,
                "remesaId": invoice.remesa_id,
            }
        )

    # ── Asociados, deudas y recibos ───────────────────────────────────

    def asociado_from_record(self, row: dict) -> Asociado:
        fecha_ingreso = row.get("fechaIngreso")
        return Asociado(
            id=self._clean_string(row["id"]),
            codigo=self._clean_string(row.get("codigo")),
            nombre=self._clean_string(row.get("nombre")),
            cedula=self._clean_string(row.get("cedula")),
            fecha_ingreso=self._parse_date(fecha_ingreso) if fecha_ingreso else None,
            telefono=self._clean_string(row.get("telefono")),
            direccion=self._clean_string(row.get("direccion")),
            status=AsociadoStatus(row.get("status", AsociadoStatus.ACTIVO.value)),
        )

    def asociado_to_record(self, asociado: Asociado) -> dict:
        return self._compact(
            {
                "id": asociado.id,
                "codigo": asociado.codigo,
                "nombre": asociado.nombre,
                "cedula": asociado.cedula,
                "fechaIngreso": asociado.fecha_ingreso.isoformat() if asociado.fecha_ingreso else None,
                "telefono": asociado.telefono,
                "direccion": asociado.direccion,
                "status": asociado.status.value,
            }
        )

    def pago_from_record(self, row: dict) -> PagoAsociado:
        monto_usd = row.get("montoUsd")
        return PagoAsociado(
            id=self._clean_string(row["id"]),
            asociado_id=self._clean_string(row["asociadoId"]),
            concepto=self._clean_string(row.get("concepto")),
            cuotas=self._clean_string(row.get("cuotas")),
            monto_bs=self._parse_money(row.get("montoBs", 0)),
            monto_usd=self._parse_money(monto_usd) if monto_usd not in (None, "") else None,
            fecha_vencimiento=self._parse_date(row["fechaVencimiento"]),
            status=DebtStatus(row.get("status", DebtStatus.PENDIENTE.value)),
            recibo_id=self._optional_string(row.get("reciboId")),
        )

    def pago_to_record(self, pago: PagoAsociado) -> dict:
        return self._compact(
            {
                "id": pago.id,
                "asociadoId": pago.asociado_id,
                "concepto": pago.concepto,
                "cuotas": pago.cuotas,
                "montoBs": self._money_out(pago.monto_bs),
                "montoUsd": self._money_out(pago.monto_usd) if pago.monto_usd is not None else None,
                "fechaVencimiento": pago.fecha_vencimiento.isoformat(),
                "status": pago.status.value,
                "reciboId": pago.recibo_id,
            }
        )

    def recibo_from_record(self, row: dict) -> ReciboPagoAsociado:
        return ReciboPagoAsociado(
            id=self._clean_string(row["id"]),
            comprobante_numero=self._clean_string(row.get("comprobanteNumero")),
            asociado_id=self._clean_string(row["asociadoId"]),
            fecha_pago=self._parse_date(row["fechaPago"]),
            monto_total_bs=self._parse_money(row.get("montoTotalBs", 0)),
            tasa_bcv=self._parse_money(row.get("tasaBcv", 0)),
            pagos_ids=tuple(str(i) for i in row.get("pagosIds") or []),
            detalles_pago=tuple(
                DetallePago(
                    tipo=self._clean_string(d.get("tipo")),
                    monto=self._parse_money(d.get("monto", 0)),
                    banco=self._optional_string(d.get("banco")),
                    referencia=self._optional_string(d.get("referencia")),
                )
                for d in row.get("detallesPago") or []
            ),
        )

    def recibo_to_record(self, recibo: ReciboPagoAsociado) -> dict:
        return {
            "id": recibo.id,
            "comprobanteNumero": recibo.comprobante_numero,
            "asociadoId": recibo.asociado_id,
            "fechaPago": recibo.fecha_pago.isoformat(),
            "montoTotalBs": self._money_out(recibo.monto_total_bs),
            "tasaBcv": self._money_out(recibo.tasa_bcv),
            "pagosIds": list(recibo.pagos_ids),
            "detallesPago": [
                self._compact(
                    {
                        "tipo": d.tipo,
                        "banco": d.banco,
                        "referencia": d.referencia,
                        "monto": self._money_out(d.monto),
                    }
                )
                for d in recibo.detalles_pago
            ],
        }

    # ── Gastos, oficinas, vehículos, inventario, auditoría ────────────

    def expense_from_record(self, row: dict) -> Expense:
        return Expense(
            id=self._clean_string(row["id"]),
            date=self._parse_date(row["date"]),
            description=self._clean_string(row.get("description")),
            category=self._clean_string(row.get("category")),
            amount=self._parse_money(row.get("amount", 0)),
            status=self._clean_string(row.get("status")) or "Pagado",
            office_id=self._optional_string(row.get("officeId")),
            supplier_rif=self._optional_string(row.get("supplierRif")),
            supplier_name=self._optional_string(row.get("supplierName")),
            invoice_number=self._optional_string(row.get("invoiceNumber")),
            control_number=self._optional_string(row.get("controlNumber")),
            taxable_base=self._optional_money(row.get("taxableBase")),
            vat_amount=self._optional_money(row.get("vatAmount")),
            payment_method_id=self._optional_string(row.get("paymentMethodId")),
        )

    def expense_to_record(self, expense: Expense) -> dict:
        return self._compact(
            {
                "id": expense.id,
                "date": expense.date.isoformat(),
                "description": expense.description,
                "category": expense.category,
                "amount": self._money_out(expense.amount),
                "status": expense.status,
                "officeId": expense.office_id,
                "supplierRif": expense.supplier_rif,
                "supplierName": expense.supplier_name,
                "invoiceNumber": expense.invoice_number,
                "controlNumber": expense.control_number,
                "taxableBase": self._optional_money_out(expense.taxable_base),
                "vatAmount": self._optional_money_out(expense.vat_amount),
                "paymentMethodId": expense.payment_method_id,
            }
        )

    def office_from_record(self, row: dict) -> Office:
        return Office(
            id=self._clean_string(row["id"]),
            name=self._clean_string(row.get("name")),
            address=self._clean_string(row.get("address")),
            phone=self._clean_string(row.get("phone")),
        )

    def office_to_record(self, office: Office) -> dict:
        return {"id": office.id, "name": office.name, "address": office.address, "phone": office.phone}

    def vehicle_from_record(self, row: dict) -> Vehicle:
        return Vehicle(
            id=self._clean_string(row["id"]),
            asociado_id=self._clean_string(row.get("asociadoId")),
            placa=self._clean_string(row.get("placa")),
            modelo=self._clean_string(row.get("modelo")),
            status=self._clean_string(row.get("status")) or "Disponible",
        )

    def vehicle_to_record(self, vehicle: Vehicle) -> dict:
        return {
            "id": vehicle.id,
            "asociadoId": vehicle.asociado_id,
            "placa": vehicle.placa,
            "modelo": vehicle.modelo,
            "status": vehicle.status,
        }

    def inventory_item_to_record(self, item: InventoryItem) -> dict:
        return self._compact(
            {
                "id": item.id,
                "sku": item.sku,
                "name": item.name,
                "description": item.description,
                "stock": item.stock,
                "unit": item.unit,
                "invoiceId": item.invoice_id,
                "invoiceNumber": item.invoice_number,
                "shippingStatus": item.shipping_status.value,
                "weight": self._optional_money_out(item.weight),
            }
        )

    def audit_log_from_record(self, row: dict) -> AuditLog:
        return AuditLog(
            id=self._clean_string(row["id"]),
            timestamp=self._parse_timestamp(row["timestamp"]),
            user_id=self._clean_string(row.get("userId")),
            user_name=self._clean_string(row.get("userName")),
            action=self._clean_string(row.get("action")),
            details=self._clean_string(row.get("details")),
            target_id=self._optional_string(row.get("targetId")),
        )

    def audit_log_to_record(self, entry: AuditLog) -> dict:
        return self._compact(
            {
                "id": entry.id,
                "timestamp": entry.timestamp.isoformat(),
                "userId": entry.user_id,
                "userName": entry.user_name,
                "action": entry.action,
                "details": entry.details,
                "targetId": entry.target_id,
            }
        )

    # ── Parsing ───────────────────────────────────────────────────────

    @staticmethod
    def _compact(record: dict[str, Any]) -> dict[str, Any]:
        """Omite claves opcionales sin valor."""
        return {k: v for k, v in record.items() if v is not None}

    @staticmethod
    def _clean_string(value: object) -> str:
        if value is None:
            return ""
        return str(value).strip()

    def _optional_string(self, value: object) -> Optional[str]:
        cleaned = self._clean_string(value)
        return cleaned or None

    @staticmethod
    def _money_out(value: Decimal) -> str:
        """Texto decimal exacto; un float perdería dígitos al releer."""
        return str(value)

    def _optional_money_out(self, value: Optional[Decimal]) -> Optional[str]:
        return None if value is None else self._money_out(value)

    def _optional_money(self, value: object) -> Optional[Decimal]:
        if value is None or value == "":
            return None
        return self._parse_money(value)

    def _parse_date(self, value: object) -> date:
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        s = str(value).strip()
        for fmt in ["%Y-%m-%d", self.date_format, "%d-%m-%Y"]:
            try:
                return datetime.strptime(s, fmt).date()
            except ValueError:
                continue
        try:
            return self._parse_timestamp(s).date()
        except ValueError:
            pass
        raise ValueError(f"Formato de fecha no reconocido: '{value}'")

    @staticmethod
    def _parse_timestamp(value: object) -> datetime:
        if isinstance(value, datetime):
            return value
        parsed = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)

    @staticmethod
    def _parse_money(value: object) -> Decimal:
        if isinstance(value, Decimal):
            return value
        if isinstance(value, bool):
            raise ValueError(f"Monto inválido: '{value}'")
        if isinstance(value, (int, float)):
            return Decimal(str(value))
        s = str(value).strip()
        s = s.replace("Bs.", "").replace("Bs", "").replace("$", "").replace(" ", "")
        # Formato venezolano (1.234,56) vs formato US (1,234.56)
        if "." in s and "," in s:
            if s.rindex(".") > s.rindex(","):
                s = s.replace(",", "")
            else:
                s = s.replace(".", "").replace(",", ".")
        elif "," in s and s.count(",") == 1:
            s = s.replace(",", ".")
        elif "." in s and s.count(".") > 1:
            s = s.replace(".", "")
        try:
            return Decimal(s)
        except InvalidOperation as e:
            raise ValueError(f"Monto inválido: '{value}'") from e
