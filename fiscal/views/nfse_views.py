# fiscal/views/nfse_views.py

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import APIException, NotFound
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from fiscal.exceptions import ERR_NFSE_CONFIG_NAO_ENCONTRADA
from fiscal.permissions import PossuiEmpresaVinculada, empresa_id_da_requisicao
from fiscal.serializers_nfse import (
    AtualizarStatusNfseInputSerializer,
    CancelarNfseInputSerializer,
    ListarNfseQuerySerializer,
    NfseConfigInputSerializer,
    NfseConfigOutputSerializer,
    NfseEmitidaSerializer,
    NfseInputSerializer,
)
from fiscal.services.nfse_service import (
    atualizar_status_nfse,
    cancelar_nfse,
    criar_nfse,
    listar_nfse,
    obter_nfse,
    obter_nfse_config,
    salvar_nfse_config,
)
from fiscal.views.log_utils import registrar_falha


@api_view(["GET", "PUT"])
@permission_classes([IsAuthenticated, PossuiEmpresaVinculada])
def nfse_config_view(request):
    """
    GET /api/v1/fiscal/nfse/config/  → configuração com segredos mascarados
    PUT /api/v1/fiscal/nfse/config/  → upsert (segredos cifrados)
    """
    empresa_id = empresa_id_da_requisicao(request)
    try:
        if request.method == "GET":
            config = obter_nfse_config(empresa_id=empresa_id)
            if config is None:
                raise NotFound({"code": ERR_NFSE_CONFIG_NAO_ENCONTRADA, "message": "NFS-e não configurada para a empresa."})
            return Response(NfseConfigOutputSerializer(config).data)

        ser_in = NfseConfigInputSerializer(data=request.data)
        ser_in.is_valid(raise_exception=True)

        config = salvar_nfse_config(empresa_id=empresa_id, **ser_in.validated_data)
        return Response(NfseConfigOutputSerializer(config).data)

    except APIException as exc:
        registrar_falha("nfse_config", request=request, empresa_id=empresa_id, exc=exc)
        raise


@api_view(["GET", "POST"])
@permission_classes([IsAuthenticated, PossuiEmpresaVinculada])
def nfse_view(request):
    """
    GET  /api/v1/fiscal/nfse/?status=&competencia_de=&competencia_ate=&cliente_id=&limit=&offset=
    POST /api/v1/fiscal/nfse/  → cria em DRAFT
    """
    empresa_id = empresa_id_da_requisicao(request)
    try:
        if request.method == "GET":
            ser_in = ListarNfseQuerySerializer(data=request.query_params)
            ser_in.is_valid(raise_exception=True)
            filtros = dict(ser_in.validated_data)
            limite = filtros.pop("limit")
            offset = filtros.pop("offset")

            pagina = listar_nfse(
                empresa_id=empresa_id,
                filtros=filtros,
                limite=limite,
                offset=offset,
            )
            return Response(
                {
                    "count": pagina.total,
                    "limit": pagina.limite,
                    "offset": pagina.offset,
                    "results": NfseEmitidaSerializer(pagina.itens, many=True).data,
                }
            )

        ser_in = NfseInputSerializer(data=request.data)
        ser_in.is_valid(raise_exception=True)

        nfse = criar_nfse(empresa_id=empresa_id, usuario=request.user, **ser_in.validated_data)
        return Response(NfseEmitidaSerializer(nfse).data, status=status.HTTP_201_CREATED)

    except APIException as exc:
        registrar_falha("nfse", request=request, empresa_id=empresa_id, exc=exc)
        raise


@api_view(["GET"])
@permission_classes([IsAuthenticated, PossuiEmpresaVinculada])
def nfse_detalhe_view(request, nfse_id):
    empresa_id = empresa_id_da_requisicao(request)
    try:
        nfse = obter_nfse(empresa_id=empresa_id, nfse_id=nfse_id)
        return Response(NfseEmitidaSerializer(nfse).data)

    except APIException as exc:
        registrar_falha("nfse_detalhe", request=request, empresa_id=empresa_id, exc=exc)
        raise


@api_view(["POST"])
@permission_classes([IsAuthenticated, PossuiEmpresaVinculada])
def cancelar_nfse_view(request, nfse_id):
    """
    POST /api/v1/fiscal/nfse/<id>/cancelar/  {motivo}

    Segunda chamada → 400; NFS-e denegada → 409.
    """
    empresa_id = empresa_id_da_requisicao(request)
    try:
        ser_in = CancelarNfseInputSerializer(data=request.data)
        ser_in.is_valid(raise_exception=True)

        nfse = cancelar_nfse(
            empresa_id=empresa_id,
            nfse_id=nfse_id,
            motivo=ser_in.validated_data["motivo"],
        )
        return Response(NfseEmitidaSerializer(nfse).data)

    except APIException as exc:
        registrar_falha("nfse_cancelar", request=request, empresa_id=empresa_id, exc=exc)
        raise


@api_view(["PATCH", "POST"])
@permission_classes([IsAuthenticated, PossuiEmpresaVinculada])
def atualizar_status_nfse_view(request, nfse_id):
    empresa_id = empresa_id_da_requisicao(request)
    try:
        ser_in = AtualizarStatusNfseInputSerializer(data=request.data)
        ser_in.is_valid(raise_exception=True)

        nfse = atualizar_status_nfse(
            empresa_id=empresa_id,
            nfse_id=nfse_id,
            **ser_in.validated_data,
        )
        return Response(NfseEmitidaSerializer(nfse).data)

    except APIException as exc:
        registrar_falha("nfse_status", request=request, empresa_id=empresa_id, exc=exc)
        raise
