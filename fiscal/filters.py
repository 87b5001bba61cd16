# fiscal/filters.py
import django_filters

from fiscal.models import NfseEmitida, StatusNfse


class NfseFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(
        choices=StatusNfse.choices,
        label='Status',
    )

    competencia_de = django_filters.DateFilter(
        field_name='data_competencia',
        lookup_expr='gte',
        label='Competência a partir de',
    )

    competencia_ate = django_filters.DateFilter(
        field_name='data_competencia',
        lookup_expr='lte',
        label='Competência até',
    )

    cliente_id = django_filters.UUIDFilter(
        field_name='cliente_id',
        label='Cliente',
    )

    class Meta:
        model = NfseEmitida
        fields = ['status', 'cliente_id']
