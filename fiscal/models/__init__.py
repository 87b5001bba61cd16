from .obrigacao_models import ObrigacaoFiscal, StatusObrigacao
from .apuracao_models import ApuracaoImposto, ItemApuracao, NaturezaItem
from .difal_models import CalculoDifal
from .nfse_models import AmbienteNfse, NfseConfig, NfseEmitida, StatusNfse
from .bloco_k_models import RegistroBlocoK, TipoMovimentoBlocoK, TipoRegistroBlocoK


__all__ = [
    "ObrigacaoFiscal",
    "StatusObrigacao",
    "ApuracaoImposto",
    "ItemApuracao",
    "NaturezaItem",
    "CalculoDifal",
    "AmbienteNfse",
    "NfseConfig",
    "NfseEmitida",
    "StatusNfse",
    "RegistroBlocoK",
    "TipoMovimentoBlocoK",
    "TipoRegistroBlocoK",
]
