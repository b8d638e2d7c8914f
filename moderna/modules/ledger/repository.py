# moderna/modules/ledger/repository.py
from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import desc, update
from sqlalchemy.orm import Session

from moderna.core.errors import InvalidKindError, NotFoundError
from moderna.shared.database.models import LEDGER_ID, Ledger, Transaction
from .schemas import TransactionKind


class LedgerRepository:
    """
    Acceso a datos del diario de transacciones y del saldo de caja.

    Ningún método hace commit: la unidad de trabajo pertenece al servicio.
    """

    def __init__(self, db: Session):
        self.db = db

    # ==================== SALDO ====================

    def get_ledger(self) -> Optional[Ledger]:
        return self.db.get(Ledger, LEDGER_ID, populate_existing=True)

    def ensure_ledger(self, base_balance: Decimal) -> Ledger:
        """Crear el registro único de saldo si todavía no existe"""
        ledger = self.get_ledger()
        if ledger:
            return ledger

        ledger = Ledger(
            id=LEDGER_ID,
            base_balance=base_balance,
            total_income=Decimal("0.00"),
            total_expense=Decimal("0.00"),
            balance=base_balance
        )
        self.db.add(ledger)
        self.db.flush()
        return ledger

    def post(self, kind: str, amount: Decimal):
        """
        Aplicar un movimiento al saldo con un incremento atómico en SQL.

        Solo lo invoca el diario de transacciones, en la misma unidad de
        trabajo que la inserción del movimiento.
        """
        if kind == TransactionKind.ingreso.value:
            values = {
                "total_income": Ledger.total_income + amount,
                "balance": Ledger.balance + amount,
            }
        elif kind == TransactionKind.egreso.value:
            values = {
                "total_expense": Ledger.total_expense + amount,
                "balance": Ledger.balance - amount,
            }
        else:
            raise InvalidKindError(f"Tipo de transacción inválido: '{kind}'")

        result = self.db.execute(
            update(Ledger)
            .where(Ledger.id == LEDGER_ID)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFoundError("El saldo de caja no está inicializado")

    # ==================== TRANSACCIONES ====================

    def create_transaction(
        self,
        description: str,
        amount: Decimal,
        kind: str,
        date_value: date
    ) -> Transaction:
        transaction = Transaction(
            description=description,
            amount=amount,
            kind=kind,
            date=date_value
        )
        self.db.add(transaction)
        self.db.flush()
        return transaction

    def list_transactions(self, kind: Optional[str] = None, limit: int = 100) -> List[Transaction]:
        query = self.db.query(Transaction)
        if kind:
            query = query.filter(Transaction.kind == kind)
        return query.order_by(desc(Transaction.date), desc(Transaction.id)).limit(limit).all()
