"""FilterSet definitions for the admin product list and the storefront."""

from __future__ import annotations

import django_filters  # type: ignore
from django.db.models import F, Q  # type: ignore

from .models import Product


def _csv(value: str) -> list[str]:
    return [part.strip() for part in str(value).split(",") if part.strip()]


class ProductFilterSet(django_filters.FilterSet):
    """Dashboard inventory list filters."""

    search = django_filters.CharFilter(method="filter_search")
    category = django_filters.CharFilter(field_name="category", lookup_expr="exact")
    status = django_filters.ChoiceFilter(field_name="status", choices=Product.Status.choices)
    is_active = django_filters.BooleanFilter(field_name="is_active")
    archived = django_filters.BooleanFilter(field_name="is_archived")
    low_stock = django_filters.BooleanFilter(method="filter_low_stock")
    badge = django_filters.NumberFilter(field_name="badge_id")

    class Meta:
        model = Product
        fields = ["category", "status", "is_active", "badge"]

    def filter_search(self, queryset, name, value):  # type: ignore
        if not value:
            return queryset
        return queryset.filter(
            Q(name__icontains=value)
            | Q(description__icontains=value)
            | Q(slug__icontains=value)
            | Q(sku__icontains=value)
            | Q(barcode__icontains=value)
        )

    def filter_low_stock(self, queryset, name, value):  # type: ignore
        if not value:
            return queryset
        return queryset.filter(inventory__quantity__lte=F("inventory__low_stock_at"))


class StorefrontProductFilterSet(django_filters.FilterSet):
    """Public product grid filters.

    Expects a queryset annotated with ``effective_price_value`` (see
    ``services.storefront_products``).
    """

    q = django_filters.CharFilter(method="filter_q")
    # CSV of category names, matches any
    categories = django_filters.CharFilter(method="filter_categories")
    # CSV of badge ids, matches any
    tags = django_filters.CharFilter(method="filter_tags")
    min_price = django_filters.NumberFilter(field_name="effective_price_value", lookup_expr="gte")
    max_price = django_filters.NumberFilter(field_name="effective_price_value", lookup_expr="lte")
    sort = django_filters.CharFilter(method="filter_sort")

    class Meta:
        model = Product
        fields: list[str] = []

    def filter_q(self, queryset, name, value):  # type: ignore
        if not value.strip():
            return queryset
        return queryset.filter(Q(name__icontains=value) | Q(description__icontains=value))

    def filter_categories(self, queryset, name, value):  # type: ignore
        names = _csv(value)
        if not names:
            return queryset
        condition = Q()
        for category in names:
            condition |= Q(category__icontains=category)
        return queryset.filter(condition)

    def filter_tags(self, queryset, name, value):  # type: ignore
        try:
            ids = [int(x) for x in _csv(value)]
        except ValueError:
            return queryset
        if not ids:
            return queryset
        return queryset.filter(badge_id__in=ids)

    def filter_sort(self, queryset, name, value):  # type: ignore
        if value == "price-low":
            return queryset.order_by("effective_price_value", "-created_at")
        if value == "price-high":
            return queryset.order_by("-effective_price_value", "-created_at")
        return queryset.order_by("-created_at")
