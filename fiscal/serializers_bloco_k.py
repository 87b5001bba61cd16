# fiscal/serializers_bloco_k.py

from rest_framework import serializers

from fiscal.models import RegistroBlocoK, TipoRegistroBlocoK
from fiscal.serializers_obrigacoes import PeriodoSerializer


class ListarBlocoKQuerySerializer(PeriodoSerializer):
    tipo_registro = serializers.ChoiceField(choices=TipoRegistroBlocoK.choices, required=False)


class RegistroBlocoKSerializer(serializers.ModelSerializer):
    material_id = serializers.UUIDField(read_only=True)
    ordem_producao_id = serializers.UUIDField(read_only=True, allow_null=True)

    class Meta:
        model = RegistroBlocoK
        fields = [
            "id",
            "ano",
            "mes",
            "tipo_registro",
            "tipo_movimento",
            "material_id",
            "codigo_item",
            "ordem_producao_id",
            "data_movimento",
            "quantidade",
        ]
        read_only_fields = fields
