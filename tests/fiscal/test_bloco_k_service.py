# tests/fiscal/test_bloco_k_service.py

from datetime import date, datetime
from decimal import Decimal

import pytest
from django.db import connection
from django.test.utils import CaptureQueriesContext
from django.utils import timezone

from fiscal.models import RegistroBlocoK, TipoRegistroBlocoK
from fiscal.services.bloco_k_service import gerar_registros_bloco_k, listar_registros_bloco_k
from producao.models import ConsumoOrdemProducao, Material, MovimentoEstoque, OrdemProducao

pytestmark = pytest.mark.django_db

D = Decimal


@pytest.fixture
def materiais(empresa):
    return {
        "acabado": Material.objects.create(empresa=empresa, codigo="PA-001", descricao="Mesa", tipo_item="04"),
        "mp": Material.objects.create(empresa=empresa, codigo="MP-001", descricao="Madeira", tipo_item="01"),
        "uso": Material.objects.create(empresa=empresa, codigo="UC-001", descricao="Luva", tipo_item="07"),
    }


def _ordem(empresa, material, numero, concluida_em, status=OrdemProducao.Status.CONCLUIDA, produzida="10"):
    return OrdemProducao.objects.create(
        empresa=empresa,
        material=material,
        numero=numero,
        quantidade_planejada=D("12"),
        quantidade_produzida=D(produzida),
        status=status,
        concluida_em=concluida_em,
    )


def _quando(ano, mes, dia):
    return timezone.make_aware(datetime(ano, mes, dia, 10, 0))


def _mov(empresa, material, tipo, qtd, data):
    return MovimentoEstoque.objects.create(
        empresa=empresa, material=material, tipo=tipo, quantidade=D(qtd), data_movimento=data
    )


def test_producao_e_consumo_do_periodo(empresa, materiais):
    ordem = _ordem(empresa, materiais["acabado"], "OP-1", _quando(2024, 1, 10))
    ConsumoOrdemProducao.objects.create(ordem=ordem, material=materiais["mp"], quantidade=D("25"))
    # fora do período e não concluída: ignoradas
    _ordem(empresa, materiais["acabado"], "OP-2", _quando(2024, 2, 1))
    _ordem(empresa, materiais["acabado"], "OP-3", None, status=OrdemProducao.Status.EM_PRODUCAO)

    registros = gerar_registros_bloco_k(empresa_id=empresa.id, ano=2024, mes=1)

    k230 = [r for r in registros if r.tipo_registro == TipoRegistroBlocoK.K230]
    k235 = [r for r in registros if r.tipo_registro == TipoRegistroBlocoK.K235]
    assert len(k230) == 1
    assert k230[0].ordem_producao_id == ordem.id
    assert k230[0].quantidade == D("10")
    assert k230[0].data_movimento == date(2024, 1, 10)
    assert len(k235) == 1
    assert k235[0].codigo_item == "MP-001"
    assert k235[0].quantidade == D("25")


def test_ordem_sem_quantidade_produzida_usa_planejada(empresa, materiais):
    _ordem(empresa, materiais["acabado"], "OP-1", _quando(2024, 1, 5), produzida="0")
    registros = gerar_registros_bloco_k(empresa_id=empresa.id, ano=2024, mes=1)
    assert registros[0].quantidade == D("12")


def test_estoque_final_no_ultimo_dia(empresa, materiais):
    _mov(empresa, materiais["mp"], "ENTRADA", "100", date(2023, 12, 20))
    _mov(empresa, materiais["mp"], "SAIDA", "30", date(2024, 1, 15))
    _mov(empresa, materiais["mp"], "SAIDA", "50", date(2024, 2, 2))  # depois do período
    _mov(empresa, materiais["acabado"], "ENTRADA", "5", date(2024, 1, 3))
    _mov(empresa, materiais["acabado"], "SAIDA", "5", date(2024, 1, 20))  # saldo zero
    _mov(empresa, materiais["uso"], "ENTRADA", "9", date(2024, 1, 3))  # uso e consumo: fora do K200

    registros = gerar_registros_bloco_k(empresa_id=empresa.id, ano=2024, mes=1)

    k200 = [r for r in registros if r.tipo_registro == TipoRegistroBlocoK.K200]
    assert [(r.codigo_item, r.quantidade, r.data_movimento) for r in k200] == [
        ("MP-001", D("70"), date(2024, 1, 31)),
    ]


def test_regerar_substitui_o_periodo(empresa, materiais):
    _ordem(empresa, materiais["acabado"], "OP-1", _quando(2024, 1, 10))
    gerar_registros_bloco_k(empresa_id=empresa.id, ano=2024, mes=1)
    gerar_registros_bloco_k(empresa_id=empresa.id, ano=2024, mes=1)

    assert RegistroBlocoK.objects.filter(empresa=empresa, ano=2024, mes=1).count() == 1


def test_ordenacao_tipo_e_data(empresa, materiais):
    _mov(empresa, materiais["mp"], "ENTRADA", "10", date(2024, 1, 2))
    o2 = _ordem(empresa, materiais["acabado"], "OP-2", _quando(2024, 1, 20))
    o1 = _ordem(empresa, materiais["acabado"], "OP-1", _quando(2024, 1, 5))
    ConsumoOrdemProducao.objects.create(ordem=o1, material=materiais["mp"], quantidade=D("1"))
    ConsumoOrdemProducao.objects.create(ordem=o2, material=materiais["mp"], quantidade=D("2"))

    registros = gerar_registros_bloco_k(empresa_id=empresa.id, ano=2024, mes=1)

    assert [(r.tipo_registro, r.data_movimento) for r in registros] == [
        ("K200", date(2024, 1, 31)),
        ("K230", date(2024, 1, 5)),
        ("K230", date(2024, 1, 20)),
        ("K235", date(2024, 1, 5)),
        ("K235", date(2024, 1, 20)),
    ]
    assert listar_registros_bloco_k(empresa_id=empresa.id, ano=2024, mes=1, tipo_registro="K235").count() == 2


def test_isolamento_por_empresa(empresa, empresa_b, materiais):
    _ordem(empresa, materiais["acabado"], "OP-1", _quando(2024, 1, 10))
    assert gerar_registros_bloco_k(empresa_id=empresa_b.id, ano=2024, mes=1) == []


def test_log_bloco_k(empresa, materiais, fiscal_logs):
    _ordem(empresa, materiais["acabado"], "OP-1", _quando(2024, 1, 10))
    gerar_registros_bloco_k(empresa_id=empresa.id, ano=2024, mes=1)
    rec = next(r for r in fiscal_logs.records if getattr(r, "event", None) == "bloco_k_gerado")
    assert rec.total == 1


def test_saldo_negativo_fica_fora_do_k200_e_gera_warning(empresa, materiais, fiscal_logs):
    _mov(empresa, materiais["mp"], "ENTRADA", "10", date(2024, 1, 2))
    _mov(empresa, materiais["mp"], "SAIDA", "25", date(2024, 1, 10))
    _mov(empresa, materiais["acabado"], "ENTRADA", "4", date(2024, 1, 5))

    registros = gerar_registros_bloco_k(empresa_id=empresa.id, ano=2024, mes=1)

    k200 = [r for r in registros if r.tipo_registro == TipoRegistroBlocoK.K200]
    assert [(r.codigo_item, r.quantidade) for r in k200] == [("PA-001", D("4"))]

    rec = next(r for r in fiscal_logs.records if getattr(r, "event", None) == "bloco_k_saldo_negativo")
    assert rec.codigo_item == "MP-001"
    assert D(rec.saldo) == D("-15")


def test_consumos_carregados_sem_consulta_por_ordem(empresa, materiais):
    def _consultas_para_gerar():
        with CaptureQueriesContext(connection) as ctx:
            registros = gerar_registros_bloco_k(empresa_id=empresa.id, ano=2024, mes=1)
        return len(ctx.captured_queries), registros

    def _ordem_com_consumos(numero):
        ordem = _ordem(empresa, materiais["acabado"], numero, _quando(2024, 1, 10))
        ConsumoOrdemProducao.objects.create(ordem=ordem, material=materiais["mp"], quantidade=D("2"))
        ConsumoOrdemProducao.objects.create(ordem=ordem, material=materiais["uso"], quantidade=D("1"))

    _ordem_com_consumos("OP-1")
    gerar_registros_bloco_k(empresa_id=empresa.id, ano=2024, mes=1)
    com_uma, _ = _consultas_para_gerar()

    for numero in ("OP-2", "OP-3", "OP-4"):
        _ordem_com_consumos(numero)
    com_quatro, registros = _consultas_para_gerar()

    assert com_quatro == com_uma
    assert len([r for r in registros if r.tipo_registro == TipoRegistroBlocoK.K235]) == 8
