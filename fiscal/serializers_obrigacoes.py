# fiscal/serializers_obrigacoes.py

from rest_framework import serializers

from fiscal.models import ObrigacaoFiscal, StatusObrigacao
from fiscal.services.calendario_service import ANO_MAXIMO, ANO_MINIMO
from fiscal.tabelas import CODIGOS_OBRIGACOES


class PeriodoSerializer(serializers.Serializer):
    """Período de referência (ano/mês) usado por quase todo endpoint fiscal."""

    ano = serializers.IntegerField(min_value=ANO_MINIMO, max_value=ANO_MAXIMO)
    mes = serializers.IntegerField(min_value=1, max_value=12)


class ListarObrigacoesQuerySerializer(PeriodoSerializer):
    status = serializers.ChoiceField(choices=StatusObrigacao.choices, required=False)


class GerarObrigacoesInputSerializer(PeriodoSerializer):
    codigos = serializers.ListField(
        child=serializers.ChoiceField(choices=CODIGOS_OBRIGACOES),
        required=False,
        allow_empty=False,
        help_text="Restringe a geração a estes códigos. Sem ele, gera o catálogo inteiro.",
    )


class AtualizarStatusObrigacaoInputSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=StatusObrigacao.choices)
    numero_recibo = serializers.CharField(required=False, max_length=100)
    nome_arquivo = serializers.CharField(required=False, max_length=255)
    conteudo_arquivo = serializers.CharField(required=False, trim_whitespace=False)
    mensagem_erro = serializers.CharField(required=False)


class ObrigacaoFiscalSerializer(serializers.ModelSerializer):
    empresa_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = ObrigacaoFiscal
        fields = [
            "id",
            "empresa_id",
            "codigo",
            "nome",
            "ano",
            "mes",
            "data_vencimento",
            "status",
            "numero_recibo",
            "nome_arquivo",
            "mensagem_erro",
            "transmitida_em",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ItemCalendarioSerializer(serializers.Serializer):
    codigo = serializers.CharField()
    nome = serializers.CharField()
    ano = serializers.IntegerField()
    mes = serializers.IntegerField()
    data_vencimento = serializers.DateField()
    status = serializers.CharField()
    obrigacao_id = serializers.CharField(allow_null=True)
    gerada = serializers.BooleanField()
