# moderna/modules/ledger/service.py
import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from moderna.core.errors import InvalidKindError, NotFoundError, ValidationError
from moderna.core.unit_of_work import unit_of_work
from moderna.shared.database.models import Transaction
from .repository import LedgerRepository
from .schemas import TransactionKind

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
VALID_KINDS = {kind.value for kind in TransactionKind}


def normalize_amount(amount: Any) -> Decimal:
    """Validar un monto positivo con a lo sumo dos decimales"""
    if amount is None or isinstance(amount, bool):
        raise ValidationError("El monto es obligatorio")
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Monto inválido: {amount!r}")
    if not value.is_finite():
        raise ValidationError(f"Monto inválido: {amount!r}")
    if value <= 0:
        raise ValidationError("El monto debe ser mayor a 0")
    if value != value.quantize(CENT):
        raise ValidationError("El monto admite como máximo dos decimales")
    return value.quantize(CENT)


class LedgerService:
    """
    Diario de transacciones de caja.

    Cada movimiento registrado actualiza el saldo en la misma unidad de
    trabajo: o quedan ambos, o ninguno.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repository = LedgerRepository(db)

    # ==================== REGISTRO ====================

    def record(
        self,
        description: Optional[str],
        amount: Any,
        kind: Optional[str],
        date_value: Optional[date]
    ) -> int:
        """Registrar un ingreso o egreso y aplicarlo al saldo"""
        if not description or not description.strip():
            raise ValidationError("La descripción es obligatoria")
        if kind not in VALID_KINDS:
            raise InvalidKindError(f"Tipo de transacción inválido: '{kind}'. Use 'ingreso' o 'egreso'")
        kind = TransactionKind(kind).value
        if date_value is None:
            raise ValidationError("La fecha es obligatoria")
        value = normalize_amount(amount)

        with unit_of_work(self.db):
            transaction = self.repository.create_transaction(
                description=description.strip(),
                amount=value,
                kind=kind,
                date_value=date_value
            )
            self.repository.post(kind, value)
            transaction_id = transaction.id

        logger.info(f"Transacción {transaction_id} registrada: {kind} {value}")
        return transaction_id

    def initialize(self, base_balance: Decimal = Decimal("0.00")) -> Dict[str, Decimal]:
        """Asegurar que exista el registro de saldo"""
        with unit_of_work(self.db):
            self.repository.ensure_ledger(Decimal(str(base_balance)).quantize(CENT))
        return self.get_balance()

    # ==================== CONSULTAS ====================

    def get_balance(self) -> Dict[str, Any]:
        ledger = self.repository.get_ledger()
        if not ledger:
            raise NotFoundError("El saldo de caja no está inicializado")
        return {
            "base": ledger.base_balance,
            "income": ledger.total_income,
            "expense": ledger.total_expense,
            "final": ledger.balance,
            "updated_at": ledger.updated_at
        }

    def list_transactions(self, kind: Optional[str] = None, limit: int = 100) -> List[Transaction]:
        if kind is not None and kind not in VALID_KINDS:
            raise InvalidKindError(f"Tipo de transacción inválido: '{kind}'")
        return self.repository.list_transactions(kind=kind, limit=limit)
