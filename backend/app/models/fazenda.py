"""Fazenda — cargo origin (farm) with cumulative harvest totals.

The totals block is never written by clients: it is recomputed from the
linked ``fretes`` rows by ``app.services.totals.recompute_farm_totals``
every time one of those shipments is created, moved or deleted.
"""

from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Fazenda(Base):
    __tablename__ = "fazendas"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # FAZ-YYYY-NNN
    codigo_fazenda: Mapped[str | None] = mapped_column(String(30), unique=True, index=True)

    fazenda: Mapped[str] = mapped_column(String(255), nullable=False)
    estado: Mapped[str] = mapped_column(String(2), nullable=False, index=True)
    proprietario: Mapped[str] = mapped_column(String(255), nullable=False)
    mercadoria: Mapped[str] = mapped_column(String(100), nullable=False)
    variedade: Mapped[str | None] = mapped_column(String(100))
    safra: Mapped[str] = mapped_column(String(20), nullable=False)
    preco_por_tonelada: Mapped[float] = mapped_column(Float, nullable=False)
    peso_medio_saca: Mapped[float] = mapped_column(Float, default=25.0)

    # ── Derived totals ───────────────────────────────────────
    total_sacas_carregadas: Mapped[float] = mapped_column(Float, default=0.0)
    total_toneladas: Mapped[float] = mapped_column(Float, default=0.0)
    faturamento_total: Mapped[float] = mapped_column(Float, default=0.0)
    ultimo_frete: Mapped[date | None] = mapped_column(Date)

    colheita_finalizada: Mapped[bool] = mapped_column(Boolean, default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )
