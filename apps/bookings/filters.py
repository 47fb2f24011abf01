"""FilterSet for the dashboard booking list."""

from __future__ import annotations

import django_filters  # type: ignore
from django.db.models import Q  # type: ignore

from .models import Booking


class BookingFilterSet(django_filters.FilterSet):
    search = django_filters.CharFilter(method="filter_search")
    status = django_filters.ChoiceFilter(choices=Booking.Status.choices)
    date_from = django_filters.DateFilter(field_name="date", lookup_expr="gte")
    date_to = django_filters.DateFilter(field_name="date", lookup_expr="lte")
    service_type = django_filters.CharFilter(field_name="service_type", lookup_expr="icontains")

    class Meta:
        model = Booking
        fields = ["status", "service_type"]

    def filter_search(self, queryset, name, value):  # type: ignore
        if not value:
            return queryset
        return queryset.filter(
            Q(booking_number__icontains=value)
            | Q(customer_name__icontains=value)
            | Q(customer_phone__icontains=value)
            | Q(customer_email__icontains=value)
            | Q(vehicle_info__icontains=value)
        )
