# fiscal/views/bloco_k_views.py

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import APIException
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from fiscal.permissions import PossuiEmpresaVinculada, empresa_id_da_requisicao
from fiscal.serializers_bloco_k import ListarBlocoKQuerySerializer, RegistroBlocoKSerializer
from fiscal.serializers_obrigacoes import PeriodoSerializer
from fiscal.services.bloco_k_service import gerar_registros_bloco_k, listar_registros_bloco_k
from fiscal.views.log_utils import registrar_falha


@api_view(["POST"])
@permission_classes([IsAuthenticated, PossuiEmpresaVinculada])
def gerar_bloco_k_view(request):
    """
    POST /api/v1/fiscal/bloco-k/gerar/  {ano, mes}

    Substitui todos os registros do período pelos recalculados.
    """
    empresa_id = empresa_id_da_requisicao(request)
    try:
        ser_in = PeriodoSerializer(data=request.data)
        ser_in.is_valid(raise_exception=True)

        registros = gerar_registros_bloco_k(empresa_id=empresa_id, **ser_in.validated_data)
        return Response(
            RegistroBlocoKSerializer(registros, many=True).data,
            status=status.HTTP_201_CREATED,
        )

    except APIException as exc:
        registrar_falha("bloco_k_gerar", request=request, empresa_id=empresa_id, exc=exc)
        raise


@api_view(["GET"])
@permission_classes([IsAuthenticated, PossuiEmpresaVinculada])
def listar_bloco_k_view(request):
    empresa_id = empresa_id_da_requisicao(request)
    try:
        ser_in = ListarBlocoKQuerySerializer(data=request.query_params)
        ser_in.is_valid(raise_exception=True)

        registros = listar_registros_bloco_k(empresa_id=empresa_id, **ser_in.validated_data)
        return Response(RegistroBlocoKSerializer(registros, many=True).data)

    except APIException as exc:
        registrar_falha("bloco_k_listar", request=request, empresa_id=empresa_id, exc=exc)
        raise
