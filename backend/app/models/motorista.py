"""Motorista — driver or owner-operator (proprietário) who carries freight.

``tipo`` decides how payments are reported: ``proprio`` drivers belong to the
company (internal guide), ``terceirizado``/``agregado`` are paid as carriers.
"""

from datetime import date, datetime

from sqlalchemy import Date, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Motorista(Base):
    __tablename__ = "motoristas"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # MOT-YYYY-NNN, derived from id at insert time
    codigo_motorista: Mapped[str | None] = mapped_column(String(30), unique=True, index=True)

    nome: Mapped[str] = mapped_column(String(255), nullable=False)
    cpf: Mapped[str | None] = mapped_column(String(14))
    documento: Mapped[str | None] = mapped_column(String(20))
    telefone: Mapped[str] = mapped_column(String(20), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255))
    endereco: Mapped[str | None] = mapped_column(Text)
    cnh_validade: Mapped[date | None] = mapped_column(Date)

    # ativo | inativo | ferias
    status: Mapped[str] = mapped_column(String(20), default="ativo", index=True)
    # proprio | terceirizado | agregado
    tipo: Mapped[str] = mapped_column(String(20), nullable=False)

    # ── Payment details ──────────────────────────────────────
    # pix | transferencia_bancaria
    tipo_pagamento: Mapped[str] = mapped_column(String(30), nullable=False)
    chave_pix_tipo: Mapped[str | None] = mapped_column(String(20))
    chave_pix: Mapped[str | None] = mapped_column(String(255))
    banco: Mapped[str | None] = mapped_column(String(100))
    agencia: Mapped[str | None] = mapped_column(String(20))
    conta: Mapped[str | None] = mapped_column(String(30))
    tipo_conta: Mapped[str | None] = mapped_column(String(20))

    receita_gerada: Mapped[float] = mapped_column(Float, default=0.0)
    viagens_realizadas: Mapped[int] = mapped_column(Integer, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )
