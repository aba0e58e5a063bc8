"""Veiculo — one truck in the fleet (table ``frota``)."""

from datetime import date, datetime

from sqlalchemy import Date, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Veiculo(Base):
    __tablename__ = "frota"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # FROTA-NNN
    codigo_frota: Mapped[str | None] = mapped_column(String(30), unique=True, index=True)

    placa: Mapped[str] = mapped_column(String(10), unique=True, nullable=False)
    placa_carreta: Mapped[str | None] = mapped_column(String(10))
    modelo: Mapped[str] = mapped_column(String(100), nullable=False)
    # TRUCK | TOCO | CARRETA | BITREM | RODOTREM | ...
    tipo_veiculo: Mapped[str] = mapped_column(String(30), nullable=False)
    capacidade_toneladas: Mapped[float | None] = mapped_column(Float)
    km_atual: Mapped[float | None] = mapped_column(Float)

    # disponivel | em_viagem | manutencao | inativo
    status: Mapped[str] = mapped_column(String(20), default="disponivel", index=True)
    # PROPRIO | TERCEIRO
    proprietario_tipo: Mapped[str] = mapped_column(String(20), default="PROPRIO")
    motorista_fixo_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("motoristas.id"), index=True
    )

    validade_licenciamento: Mapped[date | None] = mapped_column(Date)
    validade_seguro: Mapped[date | None] = mapped_column(Date)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )
