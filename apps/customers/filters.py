"""FilterSet for the customer directory."""

from __future__ import annotations

import django_filters  # type: ignore
from django.db.models import Q  # type: ignore

from .models import Customer


class CustomerFilterSet(django_filters.FilterSet):
    search = django_filters.CharFilter(method="filter_search")
    is_vip = django_filters.BooleanFilter(field_name="is_vip")

    class Meta:
        model = Customer
        fields = ["is_vip"]

    def filter_search(self, queryset, name, value):  # type: ignore
        if not value:
            return queryset
        return queryset.filter(
            Q(name__icontains=value) | Q(email__icontains=value) | Q(phone__icontains=value)
        )
