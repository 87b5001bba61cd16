from .material_models import Material
from .ordem_producao_models import OrdemProducao, ConsumoOrdemProducao
from .movimento_estoque_models import MovimentoEstoque


__all__ = [
    "Material",
    "OrdemProducao",
    "ConsumoOrdemProducao",
    "MovimentoEstoque",
]
