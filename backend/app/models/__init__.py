"""Aggregate model imports for Alembic auto-detection."""

# Registry
from app.models.motorista import Motorista  # noqa: F401
from app.models.frota import Veiculo  # noqa: F401
from app.models.fazenda import Fazenda  # noqa: F401

# Operational
from app.models.frete import Frete  # noqa: F401
from app.models.custo import Custo  # noqa: F401

# Financial
from app.models.pagamento import Pagamento  # noqa: F401
