# fiscal/serializers_nfse.py

from decimal import Decimal

from django.conf import settings
from rest_framework import serializers

from fiscal.models import AmbienteNfse, NfseEmitida, StatusNfse

ZERO = Decimal("0")
CEM = Decimal("100")


def _aliquota(**kwargs):
    return serializers.DecimalField(
        max_digits=7, decimal_places=4, min_value=ZERO, max_value=CEM, **kwargs
    )


class NfseConfigInputSerializer(serializers.Serializer):
    """
    PUT /nfse/config/. Na atualização, campo ausente mantém o valor gravado;
    senha/token só mudam quando enviados; "" apaga o segredo gravado.
    """

    codigo_provedor = serializers.CharField(max_length=30, required=False)
    codigo_municipio = serializers.RegexField(r"^\d{7}$", required=False)
    ambiente = serializers.ChoiceField(choices=AmbienteNfse.choices, required=False)
    caminho_certificado = serializers.CharField(max_length=255, required=False)
    login = serializers.CharField(max_length=120, required=False)
    senha = serializers.CharField(required=False, write_only=True, allow_blank=True, trim_whitespace=False)
    token = serializers.CharField(required=False, write_only=True, allow_blank=True, trim_whitespace=False)
    cnae = serializers.CharField(max_length=10, required=False)
    codigo_servico = serializers.CharField(max_length=20, required=False)
    aliquota_iss = _aliquota(required=False)


class NfseConfigOutputSerializer(serializers.Serializer):
    empresa_id = serializers.CharField()
    codigo_provedor = serializers.CharField()
    codigo_municipio = serializers.CharField()
    ambiente = serializers.CharField()
    caminho_certificado = serializers.CharField(allow_null=True)
    login = serializers.CharField(allow_null=True)
    senha = serializers.CharField(allow_null=True)
    token = serializers.CharField(allow_null=True)
    cnae = serializers.CharField(allow_null=True)
    codigo_servico = serializers.CharField(allow_null=True)
    aliquota_iss = serializers.DecimalField(max_digits=7, decimal_places=4, allow_null=True)
    updated_at = serializers.DateTimeField()


class NfseInputSerializer(serializers.Serializer):
    cliente_id = serializers.UUIDField()
    codigo_servico = serializers.CharField(max_length=20)
    cnae = serializers.CharField(max_length=10, required=False, allow_null=True)
    descricao = serializers.CharField()
    data_competencia = serializers.DateField()

    valor_servico = serializers.DecimalField(max_digits=15, decimal_places=2, min_value=Decimal("0.01"))
    valor_deducao = serializers.DecimalField(
        max_digits=15, decimal_places=2, min_value=ZERO, required=False, allow_null=True
    )
    aliquota_iss = _aliquota(required=False, allow_null=True)
    iss_retido = serializers.BooleanField(required=False, default=False)

    aliquota_pis = _aliquota(required=False, allow_null=True)
    aliquota_cofins = _aliquota(required=False, allow_null=True)
    aliquota_ir = _aliquota(required=False, allow_null=True)
    aliquota_csll = _aliquota(required=False, allow_null=True)
    aliquota_inss = _aliquota(required=False, allow_null=True)

    def validate(self, attrs):
        deducao = attrs.get("valor_deducao")
        if deducao is not None and deducao > attrs["valor_servico"]:
            raise serializers.ValidationError(
                {"valor_deducao": "Dedução não pode ser maior que o valor do serviço."}
            )
        return attrs


class ListarNfseQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=StatusNfse.choices, required=False)
    competencia_de = serializers.DateField(required=False)
    competencia_ate = serializers.DateField(required=False)
    cliente_id = serializers.UUIDField(required=False)
    limit = serializers.IntegerField(
        min_value=1,
        max_value=settings.FISCAL["PAGE_SIZE_MAXIMO"],
        default=settings.FISCAL["PAGE_SIZE_PADRAO"],
    )
    offset = serializers.IntegerField(min_value=0, default=0)


class CancelarNfseInputSerializer(serializers.Serializer):
    motivo = serializers.CharField(max_length=500)


class AtualizarStatusNfseInputSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=[c for c in StatusNfse.choices if c[0] != StatusNfse.CANCELLED]
    )
    numero_nfse = serializers.CharField(max_length=30, required=False)
    codigo_verificacao = serializers.CharField(max_length=60, required=False)
    mensagem_retorno = serializers.CharField(required=False)


class NfseEmitidaSerializer(serializers.ModelSerializer):
    empresa_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = NfseEmitida
        exclude = ["empresa", "criado_por"]
        read_only_fields = [
            f.name for f in NfseEmitida._meta.fields if f.name not in ("empresa", "criado_por")
        ]
