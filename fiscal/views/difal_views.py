# fiscal/views/difal_views.py

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import APIException
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from fiscal.permissions import PossuiEmpresaVinculada, empresa_id_da_requisicao
from fiscal.serializers_difal import (
    CalculoDifalSerializer,
    DifalInputSerializer,
    IcmsStInputSerializer,
    IcmsStOutputSerializer,
    ListarDifalQuerySerializer,
)
from fiscal.services.calculos import calcular_icms_st
from fiscal.services.difal_service import calcular_e_salvar_difal, listar_calculos_difal
from fiscal.views.log_utils import registrar_falha


@api_view(["GET", "POST"])
@permission_classes([IsAuthenticated, PossuiEmpresaVinculada])
def difal_view(request):
    """
    POST /api/v1/fiscal/difal/  → calcula e grava (auditoria)
    GET  /api/v1/fiscal/difal/?uf_origem=&uf_destino=&limit=  → histórico
    """
    empresa_id = empresa_id_da_requisicao(request)
    try:
        if request.method == "GET":
            ser_in = ListarDifalQuerySerializer(data=request.query_params)
            ser_in.is_valid(raise_exception=True)
            data = ser_in.validated_data

            calculos = listar_calculos_difal(
                empresa_id=empresa_id,
                uf_origem=data.get("uf_origem"),
                uf_destino=data.get("uf_destino"),
                limite=data["limit"],
            )
            return Response(CalculoDifalSerializer(calculos, many=True).data)

        ser_in = DifalInputSerializer(data=request.data)
        ser_in.is_valid(raise_exception=True)

        calculo = calcular_e_salvar_difal(empresa_id=empresa_id, **ser_in.validated_data)
        return Response(CalculoDifalSerializer(calculo).data, status=status.HTTP_201_CREATED)

    except APIException as exc:
        registrar_falha("difal", request=request, empresa_id=empresa_id, exc=exc)
        raise


@api_view(["POST"])
@permission_classes([IsAuthenticated, PossuiEmpresaVinculada])
def icms_st_view(request):
    """Simulação de ICMS-ST; nada é gravado."""
    empresa_id = empresa_id_da_requisicao(request)
    try:
        ser_in = IcmsStInputSerializer(data=request.data)
        ser_in.is_valid(raise_exception=True)

        resultado = calcular_icms_st(**ser_in.validated_data)
        return Response(IcmsStOutputSerializer(resultado).data)

    except APIException as exc:
        registrar_falha("icms_st", request=request, empresa_id=empresa_id, exc=exc)
        raise
