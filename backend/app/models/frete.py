"""Frete — one freight movement with revenue, cost and result.

``custos`` and ``resultado`` are derived: they are written only by the
totals reconciler from the shipment's ``custos`` rows.  Once
``pagamento_id`` is set the shipment is payment-locked and neither the
shipment nor its cost entries may change.
"""

from datetime import date, datetime

from sqlalchemy import Date, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Frete(Base):
    __tablename__ = "fretes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # FRT-YYYY-NNN
    codigo_frete: Mapped[str | None] = mapped_column(String(30), unique=True, index=True)

    origem: Mapped[str] = mapped_column(String(255), nullable=False)
    destino: Mapped[str] = mapped_column(String(255), nullable=False)

    # ── Links ────────────────────────────────────────────────
    motorista_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("motoristas.id"), nullable=False, index=True
    )
    motorista_nome: Mapped[str | None] = mapped_column(String(255))
    caminhao_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("frota.id"), nullable=False, index=True
    )
    caminhao_placa: Mapped[str | None] = mapped_column(String(10))
    fazenda_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("fazendas.id"), index=True
    )
    fazenda_nome: Mapped[str | None] = mapped_column(String(255))
    pagamento_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("pagamentos.id"), index=True
    )

    # ── Documents ────────────────────────────────────────────
    ticket: Mapped[str | None] = mapped_column(String(50))
    numero_nota_fiscal: Mapped[str | None] = mapped_column(String(50))

    # ── Cargo ────────────────────────────────────────────────
    mercadoria: Mapped[str] = mapped_column(String(100), nullable=False)
    variedade: Mapped[str | None] = mapped_column(String(100))
    data_frete: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    quantidade_sacas: Mapped[float] = mapped_column(Float, default=0.0)
    toneladas: Mapped[float] = mapped_column(Float, nullable=False)
    valor_por_tonelada: Mapped[float] = mapped_column(Float, nullable=False)

    # ── Financials ───────────────────────────────────────────
    receita: Mapped[float] = mapped_column(Float, default=0.0)
    custos: Mapped[float] = mapped_column(Float, default=0.0)
    resultado: Mapped[float] = mapped_column(Float, default=0.0)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )
