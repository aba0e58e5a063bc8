"""Custo — one expense line attached to a shipment."""

from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Custo(Base):
    __tablename__ = "custos"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    frete_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("fretes.id"), nullable=False, index=True
    )

    # combustivel | manutencao | pedagio | outros
    tipo: Mapped[str] = mapped_column(String(30), nullable=False)
    descricao: Mapped[str] = mapped_column(String(255), nullable=False)
    valor: Mapped[float] = mapped_column(Float, nullable=False)
    data: Mapped[date] = mapped_column(Date, nullable=False)
    comprovante: Mapped[bool] = mapped_column(Boolean, default=False)
    observacoes: Mapped[str | None] = mapped_column(Text)

    # Denormalised trip context; defaults come from the shipment
    motorista: Mapped[str | None] = mapped_column(String(255))
    caminhao: Mapped[str | None] = mapped_column(String(20))
    rota: Mapped[str | None] = mapped_column(String(255))

    # Fuel only
    litros: Mapped[float | None] = mapped_column(Float)
    tipo_combustivel: Mapped[str | None] = mapped_column(String(30))

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )
