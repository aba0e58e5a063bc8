"""Pydantic schemas for payments (pagamentos) to owner-operators."""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

StatusPagamento = Literal["pendente", "processando", "pago", "cancelado"]


def _parse_frete_ids(value) -> list[int]:
    if value is None or value == "":
        return []
    if isinstance(value, str):
        parts = [p.strip() for p in value.split(",")]
    else:
        parts = list(value)
    ids = []
    for part in parts:
        if part == "" or part is None:
            continue
        try:
            ids.append(int(part))
        except (TypeError, ValueError):
            raise ValueError(f"id de frete invalido: {part}")
    return ids


class PagamentoCreate(BaseModel):
    # Optional client-chosen code (PAG-YYYY-XXX); generated when absent/invalid
    id: str | None = None

    motorista_id: int
    motorista_nome: str | None = None
    periodo_fretes: str = Field(..., min_length=1, max_length=100)
    # "1,2,3" or [1, 2, 3]
    fretes_incluidos: str | list[int] | None = None
    # Default from the linked shipments
    quantidade_fretes: int | None = Field(None, ge=0)
    total_toneladas: float | None = Field(None, ge=0)
    valor_por_tonelada: float = Field(0.0, ge=0)
    valor_total: float | None = Field(None, ge=0)
    data_pagamento: date
    status: StatusPagamento = "pendente"
    comprovante_nome: str | None = None
    comprovante_url: str | None = None
    comprovante_data_upload: datetime | None = None
    observacoes: str | None = None

    @field_validator("fretes_incluidos")
    @classmethod
    def check_frete_ids(cls, v):
        _parse_frete_ids(v)
        return v

    @property
    def frete_ids(self) -> list[int]:
        # De-duplicated, first occurrence order
        return list(dict.fromkeys(_parse_frete_ids(self.fretes_incluidos)))


class PagamentoUpdate(BaseModel):
    motorista_nome: str | None = None
    periodo_fretes: str | None = Field(None, min_length=1, max_length=100)
    quantidade_fretes: int | None = Field(None, ge=0)
    total_toneladas: float | None = Field(None, ge=0)
    valor_por_tonelada: float | None = Field(None, ge=0)
    valor_total: float | None = Field(None, ge=0)
    data_pagamento: date | None = None
    status: StatusPagamento | None = None
    comprovante_nome: str | None = None
    comprovante_url: str | None = None
    comprovante_data_upload: datetime | None = None
    observacoes: str | None = None
    # Accepted only so the service can reject it with a clear message:
    # the method always follows the driver's registration.
    metodo_pagamento: str | None = None


class DadosPix(BaseModel):
    tipo_chave: str | None = None
    chave: str | None = None


class DadosBancarios(BaseModel):
    banco: str | None = None
    agencia: str | None = None
    conta: str | None = None
    tipo_conta: str | None = None


class Favorecido(BaseModel):
    """Payee block printed on the payment guide."""
    id: int
    nome: str
    documento: str | None = None
    metodo_pagamento: str
    dados_pix: DadosPix | None = None
    dados_bancarios: DadosBancarios | None = None


class PagamentoOut(BaseModel):
    id: int
    codigo_pagamento: str | None
    motorista_id: int
    motorista_nome: str
    proprietario_id: int | None = None
    proprietario_nome: str | None = None
    proprietario_tipo: str | None = None
    tipo_relatorio: str | None = None
    periodo_fretes: str
    quantidade_fretes: int
    fretes_incluidos: str | None = None
    total_toneladas: float
    valor_por_tonelada: float
    valor_total: float
    data_pagamento: date
    status: str
    metodo_pagamento: str
    comprovante_nome: str | None = None
    comprovante_url: str | None = None
    comprovante_data_upload: datetime | None = None
    observacoes: str | None = None
    created_at: datetime
    favorecido: Favorecido | None = None

    model_config = {"from_attributes": True}


class ResumoProprietario(BaseModel):
    """Paid shipments summed per owner-operator."""
    proprietario_id: int
    proprietario_nome: str | None
    proprietario_tipo: str | None
    tipo_relatorio: str
    quantidade_fretes: int
    total_toneladas: float
    valor_total: float
    total_custos: float
    resultado_total: float
