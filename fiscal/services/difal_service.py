# fiscal/services/difal_service.py

from __future__ import annotations

import logging
from typing import Optional

from django.conf import settings
from rest_framework.exceptions import ValidationError

from fiscal.exceptions import ERR_UF_INVALIDA, ERR_VALOR_INVALIDO
from fiscal.models import CalculoDifal
from fiscal.services.calculos import calcular_difal, obter_aliquota_interestadual, obter_uf

logger = logging.getLogger("erp.fiscal")


def calcular_e_salvar_difal(
    *,
    empresa_id,
    tipo_documento: str,
    uf_origem: str,
    uf_destino: str,
    valor_produto,
    aliquota_icms_origem,
    aliquota_icms_destino,
    aliquota_fcp=None,
    documento_id=None,
    numero_documento: Optional[str] = None,
    importado: bool = False,
) -> CalculoDifal:
    """
    Calcula o DIFAL de uma operação interestadual e grava o registro de
    auditoria. A alíquota interestadual de referência (4/7/12%) é gravada
    junto para conferência.
    """
    origem = obter_uf(uf_origem)
    destino = obter_uf(uf_destino)
    if origem.sigla == destino.sigla:
        raise ValidationError({
            "code": ERR_UF_INVALIDA,
            "message": "DIFAL só se aplica a operações interestaduais.",
        })

    resultado = calcular_difal(
        valor_produto=valor_produto,
        aliquota_icms_origem=aliquota_icms_origem,
        aliquota_icms_destino=aliquota_icms_destino,
        aliquota_fcp=aliquota_fcp,
    )

    calculo = CalculoDifal.objects.create(
        empresa_id=empresa_id,
        tipo_documento=tipo_documento,
        documento_id=documento_id,
        numero_documento=numero_documento,
        uf_origem=origem.sigla,
        uf_destino=destino.sigla,
        valor_produto=valor_produto,
        aliquota_icms_origem=aliquota_icms_origem,
        aliquota_icms_destino=aliquota_icms_destino,
        aliquota_interestadual=obter_aliquota_interestadual(
            origem.sigla, destino.sigla, importado=importado
        ),
        aliquota_fcp=aliquota_fcp,
        valor_icms_origem=resultado.valor_icms_origem,
        valor_icms_destino=resultado.valor_icms_destino,
        valor_difal=resultado.valor_difal,
        valor_fcp=resultado.valor_fcp,
        valor_total=resultado.valor_total,
    )

    logger.info(
        "difal_calculado",
        extra={
            "event": "difal_calculado",
            "empresa_id": str(empresa_id),
            "calculo_id": str(calculo.id),
            "uf_origem": origem.sigla,
            "uf_destino": destino.sigla,
            "valor_total": str(resultado.valor_total),
        },
    )
    return calculo


def listar_calculos_difal(
    *,
    empresa_id,
    uf_origem: Optional[str] = None,
    uf_destino: Optional[str] = None,
    limite: Optional[int] = None,
):
    """Histórico mais recente primeiro, limitado a PAGE_SIZE_MAXIMO."""
    padrao = settings.FISCAL["PAGE_SIZE_PADRAO"]
    maximo = settings.FISCAL["PAGE_SIZE_MAXIMO"]
    limite = padrao if limite is None else limite
    if not 1 <= limite <= maximo:
        raise ValidationError({
            "code": ERR_VALOR_INVALIDO,
            "message": f"limit deve estar entre 1 e {maximo}.",
        })

    qs = CalculoDifal.objects.filter(empresa_id=empresa_id)
    if uf_origem:
        qs = qs.filter(uf_origem=obter_uf(uf_origem).sigla)
    if uf_destino:
        qs = qs.filter(uf_destino=obter_uf(uf_destino).sigla)
    return list(qs.order_by("-created_at")[:limite])
