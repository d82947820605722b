"""Excepciones de negocio de la cooperativa."""


class CooperativaError(Exception):
    """Base para errores de la aplicación administrativa."""


class ValidationError(CooperativaError):
    """Una acción del usuario no pasó validación y fue bloqueada.

    ``code`` identifica el motivo de forma estable (``amount_mismatch``,
    ``empty_recipients``, ...) independientemente del texto del mensaje.
    """

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        super().__init__(message)


class BackupFormatError(CooperativaError):
    """El archivo de respaldo es inválido o está corrupto."""


class RecordNotFoundError(CooperativaError):
    """No existe un registro con el id solicitado en la colección."""

    def __init__(self, collection: str, record_id: str) -> None:
        self.collection = collection
        self.record_id = record_id
        super().__init__(f"Registro '{record_id}' no encontrado en '{collection}'")


class DebtInUseError(CooperativaError):
    """Se intentó eliminar una deuda referenciada por un recibo."""

    def __init__(self, debt_id: str, recibo_id: str) -> None:
        self.debt_id = debt_id
        self.recibo_id = recibo_id
        super().__init__(f"La deuda '{debt_id}' está referenciada por el recibo '{recibo_id}'")
