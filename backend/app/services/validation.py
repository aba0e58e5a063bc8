"""Referential existence checks used before a write touches a foreign key."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.custo import Custo
from app.models.fazenda import Fazenda
from app.models.frete import Frete
from app.models.frota import Veiculo
from app.models.motorista import Motorista
from app.models.pagamento import Pagamento

# Only these tables can be checked; the name never reaches SQL text.
TABLES = {
    "motoristas": Motorista,
    "frota": Veiculo,
    "fazendas": Fazenda,
    "fretes": Frete,
    "custos": Custo,
    "pagamentos": Pagamento,
}


async def exists(db: AsyncSession, table: str, id: int) -> bool:
    """Return True when a row with primary key ``id`` exists in ``table``."""
    model = TABLES.get(table)
    if model is None:
        raise ValueError(f"Unknown table: {table}")

    result = await db.execute(select(model.id).where(model.id == id).limit(1))
    return result.scalar_one_or_none() is not None
