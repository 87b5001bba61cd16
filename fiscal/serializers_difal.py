# fiscal/serializers_difal.py

from decimal import Decimal

from django.conf import settings
from rest_framework import serializers

from fiscal.models import CalculoDifal
from fiscal.tabelas import UFS_VALIDAS

ZERO = Decimal("0")
CEM = Decimal("100")


def _aliquota(**kwargs):
    return serializers.DecimalField(
        max_digits=7,
        decimal_places=4,
        min_value=ZERO,
        max_value=kwargs.pop("max_value", CEM),
        **kwargs,
    )


class UFField(serializers.ChoiceField):
    """Sigla de UF; aceita minúsculas e espaços nas pontas."""

    def __init__(self, **kwargs):
        super().__init__(choices=sorted(UFS_VALIDAS), **kwargs)

    def to_internal_value(self, data):
        if isinstance(data, str):
            data = data.strip().upper()
        return super().to_internal_value(data)


class DifalInputSerializer(serializers.Serializer):
    tipo_documento = serializers.CharField(max_length=30)
    documento_id = serializers.UUIDField(required=False, allow_null=True)
    numero_documento = serializers.CharField(max_length=60, required=False, allow_null=True)

    uf_origem = UFField()
    uf_destino = UFField()

    valor_produto = serializers.DecimalField(max_digits=15, decimal_places=2, min_value=Decimal("0.01"))
    aliquota_icms_origem = _aliquota()
    aliquota_icms_destino = _aliquota()
    aliquota_fcp = _aliquota(max_value=Decimal("10"), required=False, allow_null=True)

    importado = serializers.BooleanField(required=False, default=False)

    def validate(self, attrs):
        if attrs["uf_origem"] == attrs["uf_destino"]:
            raise serializers.ValidationError(
                {"uf_destino": "DIFAL só se aplica a operações interestaduais."}
            )
        return attrs


class ListarDifalQuerySerializer(serializers.Serializer):
    uf_origem = UFField(required=False)
    uf_destino = UFField(required=False)
    limit = serializers.IntegerField(
        min_value=1,
        max_value=settings.FISCAL["PAGE_SIZE_MAXIMO"],
        default=settings.FISCAL["PAGE_SIZE_PADRAO"],
    )


class CalculoDifalSerializer(serializers.ModelSerializer):
    empresa_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = CalculoDifal
        fields = [
            "id",
            "empresa_id",
            "tipo_documento",
            "documento_id",
            "numero_documento",
            "uf_origem",
            "uf_destino",
            "valor_produto",
            "aliquota_icms_origem",
            "aliquota_icms_destino",
            "aliquota_interestadual",
            "aliquota_fcp",
            "valor_icms_origem",
            "valor_icms_destino",
            "valor_difal",
            "valor_fcp",
            "valor_total",
            "created_at",
        ]
        read_only_fields = fields


class IcmsStInputSerializer(serializers.Serializer):
    valor_produto = serializers.DecimalField(max_digits=15, decimal_places=2, min_value=Decimal("0.01"))
    aliquota_icms = _aliquota()
    mva = serializers.DecimalField(max_digits=7, decimal_places=4, min_value=ZERO)
    aliquota_interna_st = _aliquota()
    reducao_base = _aliquota(required=False, default=CEM)


class IcmsStOutputSerializer(serializers.Serializer):
    base_icms_st = serializers.DecimalField(max_digits=15, decimal_places=2)
    valor_icms_proprio = serializers.DecimalField(max_digits=15, decimal_places=2)
    valor_icms_st = serializers.DecimalField(max_digits=15, decimal_places=2)
