# fiscal/views/apuracao_views.py

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import APIException
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from fiscal.permissions import PossuiEmpresaVinculada, empresa_id_da_requisicao
from fiscal.serializers_apuracao import (
    ApuracaoImpostoSerializer,
    ApuracaoInputSerializer,
    ItemApuracaoInputSerializer,
    ItemApuracaoSerializer,
    ListarApuracoesQuerySerializer,
    ResumoApuracaoSerializer,
)
from fiscal.serializers_obrigacoes import PeriodoSerializer
from fiscal.services.apuracao_service import (
    adicionar_item_apuracao,
    fechar_apuracao,
    listar_apuracoes,
    obter_ou_criar_apuracao,
    resumo_apuracao,
)
from fiscal.views.log_utils import registrar_falha


@api_view(["GET", "POST"])
@permission_classes([IsAuthenticated, PossuiEmpresaVinculada])
def apuracoes_view(request):
    """
    GET  /api/v1/fiscal/apuracoes/?ano=&mes=[&tipo_imposto=]  → apurações do período
    POST /api/v1/fiscal/apuracoes/  {tipo_imposto, ano, mes}   → obtém ou cria
    """
    empresa_id = empresa_id_da_requisicao(request)
    try:
        if request.method == "GET":
            ser_in = ListarApuracoesQuerySerializer(data=request.query_params)
            ser_in.is_valid(raise_exception=True)
            apuracoes = listar_apuracoes(empresa_id=empresa_id, **ser_in.validated_data)
            return Response(ApuracaoImpostoSerializer(apuracoes, many=True).data)

        ser_in = ApuracaoInputSerializer(data=request.data)
        ser_in.is_valid(raise_exception=True)
        apuracao = obter_ou_criar_apuracao(empresa_id=empresa_id, **ser_in.validated_data)
        return Response(ApuracaoImpostoSerializer(apuracao).data, status=status.HTTP_200_OK)

    except APIException as exc:
        registrar_falha("apuracoes", request=request, empresa_id=empresa_id, exc=exc)
        raise


@api_view(["POST"])
@permission_classes([IsAuthenticated, PossuiEmpresaVinculada])
def adicionar_item_apuracao_view(request, apuracao_id):
    empresa_id = empresa_id_da_requisicao(request)
    try:
        ser_in = ItemApuracaoInputSerializer(data=request.data)
        ser_in.is_valid(raise_exception=True)

        item = adicionar_item_apuracao(
            empresa_id=empresa_id,
            apuracao_id=apuracao_id,
            **ser_in.validated_data,
        )
        return Response(
            {
                "item": ItemApuracaoSerializer(item).data,
                "apuracao": ApuracaoImpostoSerializer(item.apuracao).data,
            },
            status=status.HTTP_201_CREATED,
        )

    except APIException as exc:
        registrar_falha("apuracao_item", request=request, empresa_id=empresa_id, exc=exc)
        raise


@api_view(["POST"])
@permission_classes([IsAuthenticated, PossuiEmpresaVinculada])
def fechar_apuracao_view(request):
    """
    POST /api/v1/fiscal/apuracoes/fechar/  {tipo_imposto, ano, mes}

    409 se já estiver fechada; 404 se não existir.
    """
    empresa_id = empresa_id_da_requisicao(request)
    try:
        ser_in = ApuracaoInputSerializer(data=request.data)
        ser_in.is_valid(raise_exception=True)

        apuracao = fechar_apuracao(
            empresa_id=empresa_id,
            usuario=request.user,
            **ser_in.validated_data,
        )
        return Response(ApuracaoImpostoSerializer(apuracao).data)

    except APIException as exc:
        registrar_falha("apuracao_fechar", request=request, empresa_id=empresa_id, exc=exc)
        raise


@api_view(["GET"])
@permission_classes([IsAuthenticated, PossuiEmpresaVinculada])
def resumo_apuracao_view(request):
    empresa_id = empresa_id_da_requisicao(request)
    try:
        ser_in = PeriodoSerializer(data=request.query_params)
        ser_in.is_valid(raise_exception=True)

        resumo = resumo_apuracao(empresa_id=empresa_id, **ser_in.validated_data)
        return Response(ResumoApuracaoSerializer(resumo).data)

    except APIException as exc:
        registrar_falha("apuracao_resumo", request=request, empresa_id=empresa_id, exc=exc)
        raise
