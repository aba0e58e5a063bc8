"""Pydantic schemas for shipment (frete) CRUD."""

from datetime import date, datetime

from pydantic import BaseModel, Field


class FreteCreate(BaseModel):
    # Optional client-chosen code (FRT-YYYY-XXX); generated when absent/invalid
    id: str | None = None

    origem: str = Field(..., min_length=1, max_length=255)
    destino: str = Field(..., min_length=1, max_length=255)
    motorista_id: int
    motorista_nome: str | None = None
    caminhao_id: int
    caminhao_placa: str | None = None
    ticket: str | None = None
    numero_nota_fiscal: str | None = None
    fazenda_id: int | None = None
    fazenda_nome: str | None = None
    mercadoria: str = Field(..., min_length=1, max_length=100)
    variedade: str | None = None
    data_frete: date
    quantidade_sacas: float = Field(0, ge=0)
    toneladas: float = Field(..., gt=0)
    valor_por_tonelada: float = Field(..., ge=0)
    # Defaults to toneladas * valor_por_tonelada
    receita: float | None = Field(None, ge=0)


class FreteUpdate(BaseModel):
    """Partial update.  Cost, result and payment link are not writable here."""
    origem: str | None = Field(None, min_length=1, max_length=255)
    destino: str | None = Field(None, min_length=1, max_length=255)
    motorista_id: int | None = None
    motorista_nome: str | None = None
    caminhao_id: int | None = None
    caminhao_placa: str | None = None
    ticket: str | None = None
    numero_nota_fiscal: str | None = None
    fazenda_id: int | None = None
    fazenda_nome: str | None = None
    mercadoria: str | None = Field(None, min_length=1, max_length=100)
    variedade: str | None = None
    data_frete: date | None = None
    quantidade_sacas: float | None = Field(None, ge=0)
    toneladas: float | None = Field(None, gt=0)
    valor_por_tonelada: float | None = Field(None, ge=0)
    receita: float | None = Field(None, ge=0)


class FreteOut(BaseModel):
    id: int
    codigo_frete: str | None
    origem: str
    destino: str
    motorista_id: int
    motorista_nome: str | None = None
    proprietario_id: int | None = None
    proprietario_nome: str | None = None
    motorista_tipo: str | None = None
    proprietario_tipo: str | None = None
    caminhao_id: int
    caminhao_placa: str | None = None
    caminhao_modelo: str | None = None
    ticket: str | None = None
    numero_nota_fiscal: str | None = None
    fazenda_id: int | None = None
    fazenda_nome: str | None = None
    mercadoria: str
    variedade: str | None = None
    data_frete: date
    quantidade_sacas: float
    toneladas: float
    valor_por_tonelada: float
    receita: float
    custos: float
    resultado: float
    pagamento_id: int | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class FretePendente(BaseModel):
    id: int
    codigo_frete: str | None
    origem: str
    destino: str
    motorista_id: int
    motorista_nome: str | None = None
    caminhao_id: int
    caminhao_placa: str | None = None
    ticket: str | None = None
    numero_nota_fiscal: str | None = None
    quantidade_sacas: float
    toneladas: float
    receita: float
    custos: float
    resultado: float
    data_frete: date

    model_config = {"from_attributes": True}


class GrupoPendente(BaseModel):
    """Unpaid shipments of one owner-operator, ready for a payment run."""
    proprietario_id: int
    proprietario_nome: str | None
    proprietario_tipo: str | None
    # GUIA_INTERNA | PAGAMENTO_TERCEIRO
    tipo_relatorio: str
    quantidade_fretes: int = 0
    total_toneladas: float = 0.0
    valor_total: float = 0.0
    total_custos: float = 0.0
    resultado_total: float = 0.0
    caminhao_ids: list[int] = []
    caminhao_placas: list[str] = []
    fretes: list[FretePendente] = []
