# fiscal/serializers_apuracao.py

from decimal import Decimal

from rest_framework import serializers

from fiscal.models import ApuracaoImposto, ItemApuracao, NaturezaItem
from fiscal.serializers_obrigacoes import PeriodoSerializer


class ApuracaoInputSerializer(PeriodoSerializer):
    tipo_imposto = serializers.CharField(max_length=20)

    def validate_tipo_imposto(self, value):
        value = value.strip().upper()
        if not value:
            raise serializers.ValidationError("Informe o tipo de imposto.")
        return value


class ListarApuracoesQuerySerializer(PeriodoSerializer):
    tipo_imposto = serializers.CharField(max_length=20, required=False)


class ItemApuracaoInputSerializer(serializers.Serializer):
    tipo_documento = serializers.CharField(max_length=30)
    documento_id = serializers.UUIDField(required=False, allow_null=True)
    numero_documento = serializers.CharField(max_length=60, required=False, allow_null=True)
    cfop = serializers.RegexField(r"^\d{4}$", required=False, allow_null=True)
    valor_base = serializers.DecimalField(max_digits=15, decimal_places=2, min_value=Decimal("0"))
    aliquota = serializers.DecimalField(
        max_digits=7, decimal_places=4, min_value=Decimal("0"), max_value=Decimal("100")
    )
    # negativo é barrado no service com código próprio (FISCAL_3003)
    valor_imposto = serializers.DecimalField(max_digits=15, decimal_places=2)
    natureza = serializers.ChoiceField(choices=NaturezaItem.choices)
    descricao = serializers.CharField(max_length=255, required=False, allow_null=True)


class ItemApuracaoSerializer(serializers.ModelSerializer):
    apuracao_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = ItemApuracao
        fields = [
            "id",
            "apuracao_id",
            "tipo_documento",
            "documento_id",
            "numero_documento",
            "cfop",
            "valor_base",
            "aliquota",
            "valor_imposto",
            "natureza",
            "descricao",
            "created_at",
        ]
        read_only_fields = fields


class ApuracaoImpostoSerializer(serializers.ModelSerializer):
    empresa_id = serializers.UUIDField(read_only=True)
    status = serializers.CharField(read_only=True)
    itens = ItemApuracaoSerializer(many=True, read_only=True)

    class Meta:
        model = ApuracaoImposto
        fields = [
            "id",
            "empresa_id",
            "tipo_imposto",
            "ano",
            "mes",
            "status",
            "total_credito",
            "total_debito",
            "saldo",
            "credito_anterior",
            "valor_a_recolher",
            "credito_a_transportar",
            "fechada_em",
            "itens",
        ]
        read_only_fields = fields


class ResumoTipoImpostoSerializer(serializers.Serializer):
    apuracao_id = serializers.CharField()
    tipo_imposto = serializers.CharField()
    status = serializers.CharField()
    quantidade_itens = serializers.IntegerField()
    total_credito = serializers.DecimalField(max_digits=15, decimal_places=2)
    total_debito = serializers.DecimalField(max_digits=15, decimal_places=2)
    saldo = serializers.DecimalField(max_digits=15, decimal_places=2)
    credito_anterior = serializers.DecimalField(max_digits=15, decimal_places=2)
    valor_a_recolher = serializers.DecimalField(max_digits=15, decimal_places=2)
    credito_a_transportar = serializers.DecimalField(max_digits=15, decimal_places=2)


class ResumoApuracaoSerializer(serializers.Serializer):
    ano = serializers.IntegerField()
    mes = serializers.IntegerField()
    por_tipo = ResumoTipoImpostoSerializer(many=True)
    total_credito = serializers.DecimalField(max_digits=15, decimal_places=2)
    total_debito = serializers.DecimalField(max_digits=15, decimal_places=2)
    saldo = serializers.DecimalField(max_digits=15, decimal_places=2)
    valor_a_recolher = serializers.DecimalField(max_digits=15, decimal_places=2)
