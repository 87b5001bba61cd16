# fiscal/services/nfse_service.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from django.conf import settings
from django.db import transaction
from django.db.models import Max
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from empresas.models import Empresa
from fiscal import crypto
from fiscal.exceptions import (
    ERR_NFSE_ESTADO_TERMINAL,
    ERR_NFSE_NAO_ENCONTRADA,
    ERR_TRANSICAO_NFSE,
    ERR_VALOR_INVALIDO,
    EstadoInvalido,
    NfseJaCancelada,
)
from fiscal.filters import NfseFilter
from fiscal.models import AmbienteNfse, NfseConfig, NfseEmitida, StatusNfse
from fiscal.services.calculos import CEM, ZERO, calcular_nfse, para_decimal

logger = logging.getLogger("erp.fiscal")


# Transições permitidas fora do cancelamento (que tem fluxo próprio)
TRANSICOES_VALIDAS: dict[str, set[str]] = {
    StatusNfse.DRAFT: {StatusNfse.PENDING},
    StatusNfse.PENDING: {StatusNfse.AUTHORIZED, StatusNfse.DENIED},
    StatusNfse.AUTHORIZED: set(),
    StatusNfse.DENIED: set(),
    StatusNfse.CANCELLED: set(),
}

ESTADOS_TERMINAIS = {StatusNfse.DENIED, StatusNfse.CANCELLED}


# =============================================================================
# CONFIGURAÇÃO
# =============================================================================

def _mascarar(config: NfseConfig) -> dict:
    mascara = settings.FISCAL["MASCARA_SEGREDO"]
    return {
        "empresa_id": str(config.empresa_id),
        "codigo_provedor": config.codigo_provedor,
        "codigo_municipio": config.codigo_municipio,
        "ambiente": config.ambiente,
        "caminho_certificado": config.caminho_certificado,
        "login": config.login,
        "senha": mascara if config.senha else None,
        "token": mascara if config.token else None,
        "cnae": config.cnae,
        "codigo_servico": config.codigo_servico,
        "aliquota_iss": config.aliquota_iss,
        "updated_at": config.updated_at,
    }


def obter_nfse_config(*, empresa_id) -> Optional[dict]:
    """Configuração da empresa com senha/token mascarados; None se não houver."""
    config = NfseConfig.objects.filter(empresa_id=empresa_id).first()
    if config is None:
        return None
    return _mascarar(config)


def salvar_nfse_config(
    *,
    empresa_id,
    codigo_provedor: Optional[str] = None,
    codigo_municipio: Optional[str] = None,
    ambiente: Optional[str] = None,
    caminho_certificado: Optional[str] = None,
    login: Optional[str] = None,
    senha: Optional[str] = None,
    token: Optional[str] = None,
    cnae: Optional[str] = None,
    codigo_servico: Optional[str] = None,
    aliquota_iss=None,
    cifrar: Callable[[Optional[str]], Optional[str]] = crypto.cifrar,
) -> dict:
    """
    Upsert da configuração. Campos não informados (None) mantêm o valor
    atual; senha e token são gravados cifrados e string vazia apaga o
    segredo gravado.
    """
    if ambiente is not None and ambiente not in AmbienteNfse.values:
        raise ValidationError({"code": ERR_VALOR_INVALIDO, "message": f"Ambiente inválido: {ambiente!r}."})
    if aliquota_iss is not None:
        aliquota_iss = para_decimal("aliquota_iss", aliquota_iss, minimo=ZERO, maximo=CEM)

    valores = {
        "codigo_provedor": codigo_provedor,
        "codigo_municipio": codigo_municipio,
        "ambiente": ambiente,
        "caminho_certificado": caminho_certificado,
        "login": login,
        "senha": cifrar(senha) if senha else None,
        "token": cifrar(token) if token else None,
        "cnae": cnae,
        "codigo_servico": codigo_servico,
        "aliquota_iss": aliquota_iss,
    }
    informados = {campo: valor for campo, valor in valores.items() if valor is not None}
    for campo, segredo in (("senha", senha), ("token", token)):
        if segredo == "":
            informados[campo] = None

    with transaction.atomic():
        config = NfseConfig.objects.select_for_update().filter(empresa_id=empresa_id).first()
        if config is None:
            if not codigo_provedor or not codigo_municipio:
                raise ValidationError({
                    "code": ERR_VALOR_INVALIDO,
                    "message": "codigo_provedor e codigo_municipio são obrigatórios na primeira configuração.",
                })
            config = NfseConfig.objects.create(empresa_id=empresa_id, **informados)
        else:
            for campo, valor in informados.items():
                setattr(config, campo, valor)
            config.save()

    logger.info(
        "nfse_config_salva",
        extra={
            "event": "nfse_config_salva",
            "empresa_id": str(empresa_id),
            "campos": sorted(k for k in informados if k not in ("senha", "token")),
        },
    )
    return _mascarar(config)


# =============================================================================
# EMISSÃO / CONSULTA
# =============================================================================

def criar_nfse(
    *,
    empresa_id,
    cliente_id,
    codigo_servico: str,
    descricao: str,
    data_competencia,
    valor_servico,
    aliquota_iss=None,
    cnae: Optional[str] = None,
    valor_deducao=None,
    iss_retido: bool = False,
    aliquota_pis=None,
    aliquota_cofins=None,
    aliquota_ir=None,
    aliquota_csll=None,
    aliquota_inss=None,
    usuario=None,
) -> NfseEmitida:
    """
    Cria a NFS-e em DRAFT com os tributos já calculados.

    - codigo = maior código da empresa + 1, gerado com a linha da Empresa
      travada (select_for_update), então duas emissões simultâneas nunca
      recebem o mesmo número.
    - Sem aliquota_iss na chamada, usa a da NfseConfig; sem nenhuma das duas → 400.
    """
    config = NfseConfig.objects.filter(empresa_id=empresa_id).first()
    if aliquota_iss is None and config is not None:
        aliquota_iss = config.aliquota_iss
    if aliquota_iss is None:
        raise ValidationError({
            "code": ERR_VALOR_INVALIDO,
            "message": "aliquota_iss não informada e não configurada para a empresa.",
        })
    if cnae is None and config is not None:
        cnae = config.cnae

    calculo = calcular_nfse(
        valor_servico=valor_servico,
        aliquota_iss=aliquota_iss,
        valor_deducao=valor_deducao,
        iss_retido=iss_retido,
        aliquota_pis=aliquota_pis,
        aliquota_cofins=aliquota_cofins,
        aliquota_ir=aliquota_ir,
        aliquota_csll=aliquota_csll,
        aliquota_inss=aliquota_inss,
    )

    with transaction.atomic():
        # trava a empresa: serializa a numeração
        Empresa.objects.select_for_update().only("id").get(id=empresa_id)
        ultimo = (
            NfseEmitida.objects.filter(empresa_id=empresa_id)
            .aggregate(ultimo=Max("codigo"))["ultimo"]
        )

        nfse = NfseEmitida.objects.create(
            empresa_id=empresa_id,
            codigo=(ultimo or 0) + 1,
            cliente_id=cliente_id,
            codigo_servico=codigo_servico,
            cnae=cnae,
            descricao=descricao,
            data_competencia=data_competencia,
            valor_servico=valor_servico,
            valor_deducao=valor_deducao or ZERO,
            valor_base=calculo.valor_base,
            aliquota_iss=aliquota_iss,
            valor_iss=calculo.valor_iss,
            iss_retido=iss_retido,
            aliquota_pis=aliquota_pis,
            aliquota_cofins=aliquota_cofins,
            aliquota_ir=aliquota_ir,
            aliquota_csll=aliquota_csll,
            aliquota_inss=aliquota_inss,
            valor_pis=calculo.valor_pis,
            valor_cofins=calculo.valor_cofins,
            valor_ir=calculo.valor_ir,
            valor_csll=calculo.valor_csll,
            valor_inss=calculo.valor_inss,
            valor_total_retido=calculo.valor_total_retido,
            valor_liquido=calculo.valor_liquido,
            status=StatusNfse.DRAFT,
            criado_por=usuario if getattr(usuario, "is_authenticated", False) else None,
        )

    logger.info(
        "nfse_criada",
        extra={
            "event": "nfse_criada",
            "empresa_id": str(empresa_id),
            "nfse_id": str(nfse.id),
            "codigo": nfse.codigo,
            "valor_servico": str(nfse.valor_servico),
            "valor_iss": str(nfse.valor_iss),
        },
    )
    return nfse


def _nao_encontrada() -> NotFound:
    return NotFound({"code": ERR_NFSE_NAO_ENCONTRADA, "message": "NFS-e não encontrada."})


def obter_nfse(*, empresa_id, nfse_id) -> NfseEmitida:
    nfse = NfseEmitida.objects.filter(id=nfse_id, empresa_id=empresa_id).first()
    if nfse is None:
        raise _nao_encontrada()
    return nfse


@dataclass
class PaginaNfse:
    itens: List[NfseEmitida]
    total: int
    limite: int
    offset: int


def listar_nfse(
    *,
    empresa_id,
    filtros: Optional[dict] = None,
    limite: Optional[int] = None,
    offset: int = 0,
) -> PaginaNfse:
    """
    Filtros aceitos: status, competencia_de, competencia_ate, cliente_id.
    Ordenação: código decrescente (mais recente primeiro).
    """
    maximo = settings.FISCAL["PAGE_SIZE_MAXIMO"]
    limite = settings.FISCAL["PAGE_SIZE_PADRAO"] if limite is None else limite
    if not 1 <= limite <= maximo or offset < 0:
        raise ValidationError({
            "code": ERR_VALOR_INVALIDO,
            "message": f"limit deve estar entre 1 e {maximo} e offset não pode ser negativo.",
        })

    filterset = NfseFilter(
        filtros or {},
        queryset=NfseEmitida.objects.filter(empresa_id=empresa_id),
    )
    if not filterset.is_valid():
        raise ValidationError(filterset.errors)

    qs = filterset.qs.order_by("-codigo")
    return PaginaNfse(
        itens=list(qs[offset:offset + limite]),
        total=qs.count(),
        limite=limite,
        offset=offset,
    )


# =============================================================================
# CICLO DE VIDA
# =============================================================================

def _obter_nfse_travada(*, empresa_id, nfse_id) -> NfseEmitida:
    nfse = (
        NfseEmitida.objects.select_for_update()
        .filter(id=nfse_id, empresa_id=empresa_id)
        .first()
    )
    if nfse is None:
        raise _nao_encontrada()
    return nfse


def cancelar_nfse(*, empresa_id, nfse_id, motivo: str) -> NfseEmitida:
    """
    Cancela a NFS-e uma única vez.

    - Já cancelada → 400 (NfseJaCancelada).
    - Denegada é terminal → 409.
    """
    motivo = (motivo or "").strip()
    if not motivo:
        raise ValidationError({"code": ERR_VALOR_INVALIDO, "message": "Motivo do cancelamento é obrigatório."})

    with transaction.atomic():
        nfse = _obter_nfse_travada(empresa_id=empresa_id, nfse_id=nfse_id)

        if nfse.status == StatusNfse.CANCELLED:
            raise NfseJaCancelada()
        if nfse.status == StatusNfse.DENIED:
            raise EstadoInvalido(ERR_NFSE_ESTADO_TERMINAL, "NFS-e denegada não pode ser cancelada.")

        status_anterior = nfse.status
        nfse.status = StatusNfse.CANCELLED
        nfse.cancelada_em = timezone.now()
        nfse.motivo_cancelamento = motivo
        nfse.save(update_fields=["status", "cancelada_em", "motivo_cancelamento", "updated_at"])

    logger.info(
        "nfse_cancelada",
        extra={
            "event": "nfse_cancelada",
            "empresa_id": str(empresa_id),
            "nfse_id": str(nfse.id),
            "codigo": nfse.codigo,
            "status_anterior": status_anterior,
        },
    )
    return nfse


def atualizar_status_nfse(
    *,
    empresa_id,
    nfse_id,
    status: str,
    numero_nfse: Optional[str] = None,
    codigo_verificacao: Optional[str] = None,
    mensagem_retorno: Optional[str] = None,
) -> NfseEmitida:
    """
    Registra o retorno do envio à prefeitura (DRAFT → PENDING → AUTHORIZED/DENIED).
    Mesmo status de novo é idempotente. Cancelamento não passa por aqui.
    """
    if status not in StatusNfse.values or status == StatusNfse.CANCELLED:
        raise ValidationError({
            "code": ERR_TRANSICAO_NFSE,
            "message": f"Status inválido para atualização: {status!r}.",
        })

    with transaction.atomic():
        nfse = _obter_nfse_travada(empresa_id=empresa_id, nfse_id=nfse_id)
        status_anterior = nfse.status

        if status_anterior == status:
            return nfse
        if status_anterior in ESTADOS_TERMINAIS:
            raise EstadoInvalido(
                ERR_NFSE_ESTADO_TERMINAL,
                f"NFS-e em estado terminal ({status_anterior}) não pode mudar de status.",
            )
        if status not in TRANSICOES_VALIDAS[status_anterior]:
            raise EstadoInvalido(
                ERR_TRANSICAO_NFSE,
                f"Transição {status_anterior} -> {status} não permitida.",
            )

        nfse.status = status
        campos = ["status", "updated_at"]
        if numero_nfse is not None:
            nfse.numero_nfse = numero_nfse
            campos.append("numero_nfse")
        if codigo_verificacao is not None:
            nfse.codigo_verificacao = codigo_verificacao
            campos.append("codigo_verificacao")
        if mensagem_retorno is not None:
            nfse.mensagem_retorno = mensagem_retorno
            campos.append("mensagem_retorno")
        if status == StatusNfse.AUTHORIZED:
            nfse.autorizada_em = timezone.now()
            campos.append("autorizada_em")
        nfse.save(update_fields=campos)

    logger.info(
        "nfse_status_atualizado",
        extra={
            "event": "nfse_status_atualizado",
            "empresa_id": str(empresa_id),
            "nfse_id": str(nfse.id),
            "status_anterior": status_anterior,
            "status_novo": status,
        },
    )
    return nfse
