# fiscal/services/calculos.py

"""
Cálculos fiscais puros: sem ORM, sem logging, sem efeito colateral.

Toda entrada numérica é convertida para Decimal e validada ANTES do
cálculo; valor inválido (NaN, infinito, fora da faixa) gera
ValidationError e nada é calculado.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable, Mapping, Optional

from rest_framework.exceptions import ValidationError

from fiscal.exceptions import ERR_UF_INVALIDA, ERR_VALOR_INVALIDO
from fiscal.tabelas import (
    ALIQUOTA_INTERESTADUAL_IMPORTADOS,
    ALIQUOTA_INTERESTADUAL_PADRAO,
    ALIQUOTA_INTERESTADUAL_SUL_SUDESTE,
    TABELA_UF,
    UFDef,
)

ZERO = Decimal("0")
CEM = Decimal("100")
CENTAVO = Decimal("0.01")

NATUREZA_CREDITO = "CREDIT"
NATUREZA_DEBITO = "DEBIT"


def arredondar(valor: Decimal) -> Decimal:
    return valor.quantize(CENTAVO, rounding=ROUND_HALF_UP)


def para_decimal(
    campo: str,
    valor: Any,
    *,
    minimo: Optional[Decimal] = None,
    maximo: Optional[Decimal] = None,
    positivo: bool = False,
) -> Decimal:
    """
    Converte `valor` para Decimal finito dentro da faixa informada.
    """
    try:
        dec = valor if isinstance(valor, Decimal) else Decimal(str(valor))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError({
            "code": ERR_VALOR_INVALIDO,
            "message": f"Valor numérico inválido para '{campo}'.",
        })

    if not dec.is_finite():
        raise ValidationError({
            "code": ERR_VALOR_INVALIDO,
            "message": f"Valor numérico inválido para '{campo}'.",
        })
    if positivo and dec <= ZERO:
        raise ValidationError({
            "code": ERR_VALOR_INVALIDO,
            "message": f"'{campo}' deve ser maior que zero.",
        })
    if minimo is not None and dec < minimo:
        raise ValidationError({
            "code": ERR_VALOR_INVALIDO,
            "message": f"'{campo}' deve ser maior ou igual a {minimo}.",
        })
    if maximo is not None and dec > maximo:
        raise ValidationError({
            "code": ERR_VALOR_INVALIDO,
            "message": f"'{campo}' deve ser menor ou igual a {maximo}.",
        })
    return dec


def _percentual(campo: str, valor: Any, maximo: Decimal = CEM) -> Decimal:
    return para_decimal(campo, valor, minimo=ZERO, maximo=maximo)


# =============================================================================
# ALÍQUOTA INTERESTADUAL
# =============================================================================

def obter_uf(sigla: str, tabela: Mapping[str, UFDef] = TABELA_UF) -> UFDef:
    uf = tabela.get((sigla or "").strip().upper())
    if uf is None:
        raise ValidationError({"code": ERR_UF_INVALIDA, "message": f"UF inválida: {sigla!r}."})
    return uf


def obter_aliquota_interestadual(
    uf_origem: str,
    uf_destino: str,
    *,
    importado: bool = False,
    tabela: Mapping[str, UFDef] = TABELA_UF,
) -> Decimal:
    """
    Alíquota de ICMS (%) aplicável entre duas UFs.

    Regras:
      - Mesma UF: não é operação interestadual; devolve a alíquota interna
        da UF (quem chama deve seguir o fluxo interno).
      - Mercadoria importada (informada por quem chama): 4%.
      - Origem e destino no grupo Sul/Sudeste (sem ES): 7%.
      - Demais combinações: 12%.
    """
    origem = obter_uf(uf_origem, tabela)
    destino = obter_uf(uf_destino, tabela)

    if origem.sigla == destino.sigla:
        return origem.aliquota_interna
    if importado:
        return ALIQUOTA_INTERESTADUAL_IMPORTADOS
    if origem.sul_sudeste and destino.sul_sudeste:
        return ALIQUOTA_INTERESTADUAL_SUL_SUDESTE
    return ALIQUOTA_INTERESTADUAL_PADRAO


# =============================================================================
# DIFAL / ICMS-ST
# =============================================================================

@dataclass(frozen=True)
class DifalResultado:
    valor_icms_origem: Decimal
    valor_icms_destino: Decimal
    valor_difal: Decimal
    valor_fcp: Decimal
    valor_total: Decimal


def calcular_difal(
    *,
    valor_produto,
    aliquota_icms_origem,
    aliquota_icms_destino,
    aliquota_fcp=None,
) -> DifalResultado:
    """
    DIFAL = max(0, ICMS destino − ICMS origem); o destino nunca devolve
    diferença negativa. FCP incide sobre o valor do produto.
    """
    valor = para_decimal("valor_produto", valor_produto, positivo=True)
    aliq_origem = _percentual("aliquota_icms_origem", aliquota_icms_origem)
    aliq_destino = _percentual("aliquota_icms_destino", aliquota_icms_destino)
    aliq_fcp = (
        _percentual("aliquota_fcp", aliquota_fcp, maximo=Decimal("10"))
        if aliquota_fcp is not None
        else None
    )

    icms_origem = arredondar(valor * aliq_origem / CEM)
    icms_destino = arredondar(valor * aliq_destino / CEM)
    difal = max(ZERO, icms_destino - icms_origem)
    fcp = arredondar(valor * aliq_fcp / CEM) if aliq_fcp else ZERO

    return DifalResultado(
        valor_icms_origem=icms_origem,
        valor_icms_destino=icms_destino,
        valor_difal=difal,
        valor_fcp=fcp,
        valor_total=difal + fcp,
    )


@dataclass(frozen=True)
class IcmsStResultado:
    base_icms_st: Decimal
    valor_icms_proprio: Decimal
    valor_icms_st: Decimal


def calcular_icms_st(
    *,
    valor_produto,
    aliquota_icms,
    mva,
    aliquota_interna_st,
    reducao_base=CEM,
) -> IcmsStResultado:
    """
    ICMS-ST = max(0, base_ST * alíquota interna − ICMS próprio), com
    base_ST = valor * (1 + MVA) * percentual de base mantido.
    """
    valor = para_decimal("valor_produto", valor_produto, positivo=True)
    aliq_icms = _percentual("aliquota_icms", aliquota_icms)
    mva_dec = para_decimal("mva", mva, minimo=ZERO)
    aliq_st = _percentual("aliquota_interna_st", aliquota_interna_st)
    reducao = _percentual("reducao_base", reducao_base)

    base_st = valor * (1 + mva_dec / CEM) * (reducao / CEM)
    icms_proprio = valor * aliq_icms / CEM
    icms_st = max(ZERO, base_st * aliq_st / CEM - icms_proprio)

    return IcmsStResultado(
        base_icms_st=arredondar(base_st),
        valor_icms_proprio=arredondar(icms_proprio),
        valor_icms_st=arredondar(icms_st),
    )


# =============================================================================
# NFS-e
# =============================================================================

@dataclass(frozen=True)
class NfseCalculo:
    valor_base: Decimal
    valor_iss: Decimal
    valor_pis: Decimal
    valor_cofins: Decimal
    valor_ir: Decimal
    valor_csll: Decimal
    valor_inss: Decimal
    valor_total_retido: Decimal
    valor_liquido: Decimal


def calcular_nfse(
    *,
    valor_servico,
    aliquota_iss,
    valor_deducao=None,
    iss_retido: bool = False,
    aliquota_pis=None,
    aliquota_cofins=None,
    aliquota_ir=None,
    aliquota_csll=None,
    aliquota_inss=None,
) -> NfseCalculo:
    """
    Base = serviço − dedução; cada tributo = base * alíquota / 100.

    O líquido só desconta os tributos quando há retenção (iss_retido);
    sem retenção o tomador paga o valor cheio do serviço.
    """
    servico = para_decimal("valor_servico", valor_servico, positivo=True)
    deducao = (
        para_decimal("valor_deducao", valor_deducao, minimo=ZERO, maximo=servico)
        if valor_deducao is not None
        else ZERO
    )
    base = servico - deducao

    def _tributo(campo, aliquota):
        if aliquota is None:
            return ZERO
        return arredondar(base * _percentual(campo, aliquota) / CEM)

    iss = _tributo("aliquota_iss", aliquota_iss)
    pis = _tributo("aliquota_pis", aliquota_pis)
    cofins = _tributo("aliquota_cofins", aliquota_cofins)
    ir = _tributo("aliquota_ir", aliquota_ir)
    csll = _tributo("aliquota_csll", aliquota_csll)
    inss = _tributo("aliquota_inss", aliquota_inss)

    total_retido = (iss + pis + cofins + ir + csll + inss) if iss_retido else ZERO

    return NfseCalculo(
        valor_base=arredondar(base),
        valor_iss=iss,
        valor_pis=pis,
        valor_cofins=cofins,
        valor_ir=ir,
        valor_csll=csll,
        valor_inss=inss,
        valor_total_retido=total_retido,
        valor_liquido=arredondar(servico - total_retido),
    )


# =============================================================================
# APURAÇÃO
# =============================================================================

@dataclass(frozen=True)
class SaldoApuracao:
    total_credito: Decimal
    total_debito: Decimal
    saldo: Decimal


def _campo(item, nome):
    if isinstance(item, Mapping):
        return item[nome]
    return getattr(item, nome)


def calcular_saldo_apuracao(itens: Iterable) -> SaldoApuracao:
    """
    total_credito = Σ valor_imposto (CREDIT), total_debito = Σ valor_imposto (DEBIT),
    saldo = total_credito − total_debito. Lista vazia → tudo zero.

    Aceita instâncias de ItemApuracao ou mapeamentos com
    'natureza' e 'valor_imposto'.
    """
    credito = ZERO
    debito = ZERO
    for item in itens:
        valor = para_decimal("valor_imposto", _campo(item, "valor_imposto"))
        natureza = _campo(item, "natureza")
        if natureza == NATUREZA_CREDITO:
            credito += valor
        elif natureza == NATUREZA_DEBITO:
            debito += valor
        else:
            raise ValidationError({
                "code": ERR_VALOR_INVALIDO,
                "message": f"Natureza inválida: {natureza!r}.",
            })
    return SaldoApuracao(total_credito=credito, total_debito=debito, saldo=credito - debito)


@dataclass(frozen=True)
class ValorARecolher:
    valor_a_recolher: Decimal
    credito_a_transportar: Decimal


def calcular_valor_a_recolher(*, total_debito, total_credito, credito_anterior=ZERO) -> ValorARecolher:
    """
    Débito maior que créditos (do período + transportado) → imposto a recolher;
    caso contrário a sobra vira crédito para o período seguinte.
    """
    debito = para_decimal("total_debito", total_debito, minimo=ZERO)
    credito = para_decimal("total_credito", total_credito, minimo=ZERO)
    anterior = para_decimal("credito_anterior", credito_anterior, minimo=ZERO)

    resultado = debito - credito - anterior
    if resultado > ZERO:
        return ValorARecolher(valor_a_recolher=arredondar(resultado), credito_a_transportar=ZERO)
    return ValorARecolher(valor_a_recolher=ZERO, credito_a_transportar=arredondar(-resultado))
