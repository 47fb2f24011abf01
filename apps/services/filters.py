"""FilterSet for the admin service list."""

from __future__ import annotations

import django_filters  # type: ignore
from django.db.models import Q  # type: ignore

from .models import Service


class ServiceFilterSet(django_filters.FilterSet):
    search = django_filters.CharFilter(method="filter_search")
    is_active = django_filters.BooleanFilter(field_name="is_active")
    location = django_filters.ChoiceFilter(field_name="location", choices=Service.Location.choices)

    class Meta:
        model = Service
        fields = ["is_active", "location"]

    def filter_search(self, queryset, name, value):  # type: ignore
        if not value:
            return queryset
        return queryset.filter(
            Q(title__icontains=value) | Q(description__icontains=value) | Q(slug__icontains=value)
        )
