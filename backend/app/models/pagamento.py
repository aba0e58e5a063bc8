"""Pagamento — a payment run to one owner-operator covering a set of fretes.

Linking a shipment (``fretes.pagamento_id``) locks its cost and result.
Deleting the payment unlinks the shipments, which become pending again.

Lifecycle:  pendente → processando → pago | cancelado
"""

from datetime import date, datetime

from sqlalchemy import Date, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Pagamento(Base):
    __tablename__ = "pagamentos"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # PAG-YYYY-NNN
    codigo_pagamento: Mapped[str | None] = mapped_column(String(30), unique=True, index=True)

    motorista_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("motoristas.id"), nullable=False, index=True
    )
    motorista_nome: Mapped[str] = mapped_column(String(255), nullable=False)

    # ── Covered shipments ────────────────────────────────────
    periodo_fretes: Mapped[str] = mapped_column(String(100), nullable=False)
    quantidade_fretes: Mapped[int] = mapped_column(Integer, default=0)
    # Comma separated frete ids, kept for the printed guide
    fretes_incluidos: Mapped[str | None] = mapped_column(Text)

    # ── Amounts ──────────────────────────────────────────────
    total_toneladas: Mapped[float] = mapped_column(Float, default=0.0)
    valor_por_tonelada: Mapped[float] = mapped_column(Float, default=0.0)
    valor_total: Mapped[float] = mapped_column(Float, nullable=False)

    data_pagamento: Mapped[date] = mapped_column(Date, nullable=False)
    # pendente | processando | pago | cancelado
    status: Mapped[str] = mapped_column(String(20), default="pendente", index=True)
    # Copied from the driver's tipo_pagamento; not editable
    metodo_pagamento: Mapped[str] = mapped_column(String(30), nullable=False)

    # ── Receipt ──────────────────────────────────────────────
    comprovante_nome: Mapped[str | None] = mapped_column(String(255))
    comprovante_url: Mapped[str | None] = mapped_column(String(500))
    comprovante_data_upload: Mapped[datetime | None] = mapped_column(DateTime)

    observacoes: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )
