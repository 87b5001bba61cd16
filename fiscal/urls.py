# fiscal/urls.py

from django.urls import path

from fiscal.views import apuracao_views, bloco_k_views, difal_views, nfse_views, obrigacao_views

app_name = "fiscal"

urlpatterns = [
    # obrigações acessórias + calendário
    path("obrigacoes/", obrigacao_views.listar_obrigacoes_view, name="obrigacoes"),
    path("obrigacoes/gerar/", obrigacao_views.gerar_obrigacoes_view, name="obrigacoes_gerar"),
    path(
        "obrigacoes/<uuid:obrigacao_id>/status/",
        obrigacao_views.atualizar_status_obrigacao_view,
        name="obrigacao_status",
    ),
    path("calendario/", obrigacao_views.calendario_fiscal_view, name="calendario"),

    # apuração
    path("apuracoes/", apuracao_views.apuracoes_view, name="apuracoes"),
    path("apuracoes/fechar/", apuracao_views.fechar_apuracao_view, name="apuracao_fechar"),
    path("apuracoes/resumo/", apuracao_views.resumo_apuracao_view, name="apuracao_resumo"),
    path(
        "apuracoes/<uuid:apuracao_id>/itens/",
        apuracao_views.adicionar_item_apuracao_view,
        name="apuracao_itens",
    ),

    # DIFAL / ICMS-ST
    path("difal/", difal_views.difal_view, name="difal"),
    path("icms-st/", difal_views.icms_st_view, name="icms_st"),

    # NFS-e
    path("nfse/config/", nfse_views.nfse_config_view, name="nfse_config"),
    path("nfse/", nfse_views.nfse_view, name="nfse"),
    path("nfse/<uuid:nfse_id>/", nfse_views.nfse_detalhe_view, name="nfse_detalhe"),
    path("nfse/<uuid:nfse_id>/cancelar/", nfse_views.cancelar_nfse_view, name="nfse_cancelar"),
    path("nfse/<uuid:nfse_id>/status/", nfse_views.atualizar_status_nfse_view, name="nfse_status"),

    # Bloco K
    path("bloco-k/", bloco_k_views.listar_bloco_k_view, name="bloco_k"),
    path("bloco-k/gerar/", bloco_k_views.gerar_bloco_k_view, name="bloco_k_gerar"),
]
