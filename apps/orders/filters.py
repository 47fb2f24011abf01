"""FilterSet for the dashboard order list."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Order
from .services import search_orders


class OrderFilterSet(django_filters.FilterSet):
    search = django_filters.CharFilter(method="filter_search")
    status = django_filters.ChoiceFilter(choices=Order.Status.choices)
    date_from = django_filters.DateFilter(field_name="created_at", lookup_expr="date__gte")
    date_to = django_filters.DateFilter(field_name="created_at", lookup_expr="date__lte")
    customer = django_filters.NumberFilter(field_name="customer_id")

    class Meta:
        model = Order
        fields = ["status", "customer"]

    def filter_search(self, queryset, name, value):  # type: ignore
        if not value:
            return queryset
        return search_orders(queryset, value.strip())
