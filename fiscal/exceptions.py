# fiscal/exceptions.py

from rest_framework import status
from rest_framework.exceptions import APIException

# Códigos de erro do domínio fiscal
ERR_OBRIGACAO_NAO_ENCONTRADA = "FISCAL_1001"
ERR_APURACAO_NAO_ENCONTRADA = "FISCAL_1002"
ERR_NFSE_NAO_ENCONTRADA = "FISCAL_1003"
ERR_NFSE_CONFIG_NAO_ENCONTRADA = "FISCAL_1004"

ERR_APURACAO_FECHADA = "FISCAL_2001"
ERR_TRANSICAO_OBRIGACAO = "FISCAL_2002"
ERR_NFSE_JA_CANCELADA = "FISCAL_2003"
ERR_NFSE_ESTADO_TERMINAL = "FISCAL_2004"
ERR_TRANSICAO_NFSE = "FISCAL_2005"
ERR_CALCULO_IMUTAVEL = "FISCAL_2006"

ERR_VALOR_INVALIDO = "FISCAL_3001"
ERR_UF_INVALIDA = "FISCAL_3002"
ERR_VALOR_IMPOSTO_NEGATIVO = "FISCAL_3003"
ERR_VALOR_IMPOSTO_INCONSISTENTE = "FISCAL_3004"
ERR_OBRIGACAO_DESCONHECIDA = "FISCAL_3005"
ERR_CAMPOS_NAO_PERMITIDOS = "FISCAL_3006"
ERR_PERIODO_INVALIDO = "FISCAL_3007"


class EstadoInvalido(APIException):
    """
    Operação incompatível com o estado atual da entidade
    (apuração fechada, transição de obrigação proibida, NFS-e terminal...).
    """
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Operação não permitida no estado atual."
    default_code = "invalid_state"

    def __init__(self, code: str, message: str):
        self.code = code
        super().__init__(detail={"code": code, "message": message})


class NfseJaCancelada(EstadoInvalido):
    status_code = status.HTTP_400_BAD_REQUEST
    default_code = "bad_request"

    def __init__(self, message: str = "NFS-e já está cancelada."):
        super().__init__(ERR_NFSE_JA_CANCELADA, message)
