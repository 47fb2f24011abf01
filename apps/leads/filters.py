"""FilterSet for the lead inbox."""

from __future__ import annotations

import django_filters  # type: ignore
from django.db.models import Q  # type: ignore

from .models import Lead


class LeadFilterSet(django_filters.FilterSet):
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = Lead
        fields = ["status", "source"]

    def filter_search(self, queryset, name, value):  # type: ignore
        if not value:
            return queryset
        return queryset.filter(
            Q(name__icontains=value)
            | Q(email__icontains=value)
            | Q(phone__icontains=value)
            | Q(subject__icontains=value)
            | Q(message__icontains=value)
        )
