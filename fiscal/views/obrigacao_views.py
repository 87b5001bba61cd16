# fiscal/views/obrigacao_views.py

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import APIException
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from fiscal.permissions import PossuiEmpresaVinculada, empresa_id_da_requisicao
from fiscal.serializers_obrigacoes import (
    AtualizarStatusObrigacaoInputSerializer,
    GerarObrigacoesInputSerializer,
    ItemCalendarioSerializer,
    ListarObrigacoesQuerySerializer,
    ObrigacaoFiscalSerializer,
    PeriodoSerializer,
)
from fiscal.services.calendario_service import gerar_calendario_fiscal
from fiscal.services.obrigacao_service import (
    DadosTransmissao,
    atualizar_status_obrigacao,
    gerar_obrigacoes,
    listar_obrigacoes,
)
from fiscal.views.log_utils import registrar_falha


@api_view(["GET"])
@permission_classes([IsAuthenticated, PossuiEmpresaVinculada])
def listar_obrigacoes_view(request):
    """
    GET /api/v1/fiscal/obrigacoes/?ano=2024&mes=1[&status=PENDING]
    """
    empresa_id = empresa_id_da_requisicao(request)
    try:
        ser_in = ListarObrigacoesQuerySerializer(data=request.query_params)
        ser_in.is_valid(raise_exception=True)

        obrigacoes = listar_obrigacoes(empresa_id=empresa_id, **ser_in.validated_data)
        return Response(ObrigacaoFiscalSerializer(obrigacoes, many=True).data)

    except APIException as exc:
        registrar_falha("obrigacoes_listar", request=request, empresa_id=empresa_id, exc=exc)
        raise


@api_view(["POST"])
@permission_classes([IsAuthenticated, PossuiEmpresaVinculada])
def gerar_obrigacoes_view(request):
    """
    POST /api/v1/fiscal/obrigacoes/gerar/

    Idempotente: chamar de novo para o mesmo período devolve as mesmas obrigações.
    """
    empresa_id = empresa_id_da_requisicao(request)
    try:
        ser_in = GerarObrigacoesInputSerializer(data=request.data)
        ser_in.is_valid(raise_exception=True)
        data = ser_in.validated_data

        obrigacoes = gerar_obrigacoes(
            empresa_id=empresa_id,
            ano=data["ano"],
            mes=data["mes"],
            codigos=data.get("codigos"),
        )
        return Response(
            ObrigacaoFiscalSerializer(obrigacoes, many=True).data,
            status=status.HTTP_201_CREATED,
        )

    except APIException as exc:
        registrar_falha("obrigacoes_gerar", request=request, empresa_id=empresa_id, exc=exc)
        raise


@api_view(["PATCH", "POST"])
@permission_classes([IsAuthenticated, PossuiEmpresaVinculada])
def atualizar_status_obrigacao_view(request, obrigacao_id):
    """
    PATCH /api/v1/fiscal/obrigacoes/<id>/status/

    Usado pelo subsistema de geração/transmissão para registrar o andamento.
    """
    empresa_id = empresa_id_da_requisicao(request)
    try:
        ser_in = AtualizarStatusObrigacaoInputSerializer(data=request.data)
        ser_in.is_valid(raise_exception=True)
        data = dict(ser_in.validated_data)

        obrigacao = atualizar_status_obrigacao(
            empresa_id=empresa_id,
            obrigacao_id=obrigacao_id,
            status=data.pop("status"),
            dados=DadosTransmissao(**data),
        )
        return Response(ObrigacaoFiscalSerializer(obrigacao).data)

    except APIException as exc:
        registrar_falha("obrigacao_status", request=request, empresa_id=empresa_id, exc=exc)
        raise


@api_view(["GET"])
@permission_classes([IsAuthenticated, PossuiEmpresaVinculada])
def calendario_fiscal_view(request):
    """
    GET /api/v1/fiscal/calendario/?ano=2024&mes=1

    Somente leitura: mostra também as obrigações ainda não geradas.
    """
    empresa_id = empresa_id_da_requisicao(request)
    try:
        ser_in = PeriodoSerializer(data=request.query_params)
        ser_in.is_valid(raise_exception=True)

        itens = gerar_calendario_fiscal(empresa_id=empresa_id, **ser_in.validated_data)
        return Response(ItemCalendarioSerializer(itens, many=True).data)

    except APIException as exc:
        registrar_falha("calendario_fiscal", request=request, empresa_id=empresa_id, exc=exc)
        raise
