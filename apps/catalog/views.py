"""Catalog API views: dashboard inventory, badges and the public storefront."""

from __future__ import annotations

import logging

from django.shortcuts import get_object_or_404  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.filters import OrderingFilter  # type: ignore
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.core.pagination import StorefrontPagination
from apps.core.storage import ImageValidationError, get_image_storage

from . import services
from .filters import ProductFilterSet, StorefrontProductFilterSet
from .models import Badge, Product, ProductImage
from .serializers import (
    BadgeSerializer,
    BulkIdsSerializer,
    ImageDeleteSerializer,
    InventorySerializer,
    ProductSerializer,
    ProductWriteSerializer,
    RebalanceSerializer,
    StockUpdateSerializer,
    StorefrontProductSerializer,
    TopSellerSerializer,
)

logger = logging.getLogger(__name__)


class ProductViewSet(viewsets.ModelViewSet):
    """
    Dashboard inventory.

    Detail routes accept either the numeric id or the slug; an all-digit
    value that matches no id is tried as a slug.
    Archived products are hidden unless ``?archived=true|false`` is passed.
    """

    queryset = Product.objects.select_related("badge", "inventory").prefetch_related("images")
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = ProductFilterSet
    ordering_fields = ["name", "price", "created_at", "updated_at", "inventory__quantity"]
    parser_classes = [JSONParser, MultiPartParser, FormParser]

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        if self.action == "list" and "archived" not in self.request.query_params:
            qs = qs.filter(is_archived=False)
        return qs

    def get_serializer_class(self):  # type: ignore
        if self.action in {"create", "update", "partial_update"}:
            return ProductWriteSerializer
        return ProductSerializer

    def get_object(self):  # type: ignore
        lookup = self.kwargs[self.lookup_url_kwarg or self.lookup_field]
        queryset = self.get_queryset()
        obj = None
        if str(lookup).isdigit():
            obj = queryset.filter(pk=int(lookup)).first()
        if obj is None:
            obj = get_object_or_404(queryset, slug=lookup)
        self.check_object_permissions(self.request, obj)
        return obj

    def destroy(self, request, *args, **kwargs):  # type: ignore
        services.delete_product(self.get_object())
        return Response(status=status.HTTP_204_NO_CONTENT)

    def _product_response(self, product: Product) -> Response:
        product.refresh_from_db()
        return Response(ProductSerializer(product).data)

    @action(detail=True, methods=["post"])
    def deactivate(self, request, pk=None):  # type: ignore
        return self._product_response(services.deactivate_product(self.get_object()))

    @action(detail=True, methods=["post"], url_path="toggle-active")
    def toggle_active(self, request, pk=None):  # type: ignore
        return self._product_response(services.toggle_product_active(self.get_object()))

    @action(detail=True, methods=["post"])
    def archive(self, request, pk=None):  # type: ignore
        return self._product_response(services.archive_product(self.get_object()))

    @action(detail=True, methods=["post"])
    def unarchive(self, request, pk=None):  # type: ignore
        return self._product_response(services.unarchive_product(self.get_object()))

    @action(detail=True, methods=["post"])
    def stock(self, request, pk=None):  # type: ignore
        product = self.get_object()
        serializer = StockUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        inventory = services.update_stock(
            product,
            serializer.validated_data["quantity"],
            serializer.validated_data["operation"],
        )
        product.refresh_from_db()
        return Response(
            {"success": True, "status": product.status, "inventory": InventorySerializer(inventory).data}
        )

    @action(detail=True, methods=["get"], url_path="stock-details")
    def stock_details(self, request, pk=None):  # type: ignore
        return Response(services.stock_details(self.get_object()))

    @action(detail=False, methods=["post"])
    def rebalance(self, request):  # type: ignore
        serializer = RebalanceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return Response(services.rebalance_stock(serializer.validated_data["items"]))

    @action(detail=False, methods=["post"], url_path="bulk-archive")
    def bulk_archive(self, request):  # type: ignore
        serializer = BulkIdsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        count = services.bulk_archive_products(serializer.validated_data["ids"])
        return Response({"success": True, "count": count})

    @action(detail=False, methods=["post"], url_path="bulk-delete")
    def bulk_delete(self, request):  # type: ignore
        serializer = BulkIdsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = services.bulk_delete_products(serializer.validated_data["ids"])
        return Response({"success": True, **result})

    @action(detail=False, methods=["get"])
    def categories(self, request):  # type: ignore
        return Response(services.product_categories())

    @action(detail=False, methods=["get"], url_path="low-stock")
    def low_stock(self, request):  # type: ignore
        return Response(ProductSerializer(services.low_stock_products(), many=True).data)

    @action(detail=False, methods=["post"], url_path="upload-image", parser_classes=[MultiPartParser, FormParser])
    def upload_image(self, request):  # type: ignore
        upload = request.FILES.get("file")
        if upload is None:
            return Response({"success": False, "error": "No file provided."}, status=status.HTTP_400_BAD_REQUEST)
        try:
            stored = get_image_storage("products").upload(upload)
        except ImageValidationError as exc:
            return Response({"success": False, "error": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(stored, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["post"], url_path="delete-image")
    def delete_image(self, request):  # type: ignore
        serializer = ImageDeleteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        public_id = serializer.validated_data["public_id"]
        get_image_storage("products").delete(public_id)
        removed, _detail = ProductImage.objects.filter(public_id=public_id).delete()
        return Response({"success": True, "removed": removed})


class BadgeViewSet(viewsets.ModelViewSet):
    """Badge CRUD; the list carries product usage counts."""

    serializer_class = BadgeSerializer
    pagination_class = None

    def get_queryset(self):  # type: ignore
        return services.badges_with_usage()

    def get_permissions(self):  # type: ignore
        if self.action == "active":
            return [permissions.AllowAny()]
        return super().get_permissions()

    def destroy(self, request, *args, **kwargs):  # type: ignore
        services.delete_badge(self.get_object())
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["get"])
    def active(self, request):  # type: ignore
        badges = Badge.objects.filter(is_active=True)
        return Response(BadgeSerializer(badges, many=True).data)


class StorefrontProductViewSet(viewsets.ReadOnlyModelViewSet):
    """Public product catalogue, looked up by slug."""

    serializer_class = StorefrontProductSerializer
    permission_classes = [permissions.AllowAny]
    authentication_classes: list = []
    pagination_class = StorefrontPagination
    filter_backends = [DjangoFilterBackend]
    filterset_class = StorefrontProductFilterSet
    lookup_field = "slug"

    def get_queryset(self):  # type: ignore
        return services.storefront_products()

    @action(detail=True, methods=["get"])
    def related(self, request, slug=None):  # type: ignore
        product = self.get_object()
        return Response(self.get_serializer(services.related_products(product), many=True).data)

    @action(detail=False, methods=["get"])
    def latest(self, request):  # type: ignore
        return Response({"data": self.get_serializer(services.latest_products(), many=True).data})

    @action(detail=False, methods=["get"], url_path="top-sellers")
    def top_sellers(self, request):  # type: ignore
        products = services.top_sellers()
        return Response({"data": TopSellerSerializer(products, many=True).data})

    @action(detail=False, methods=["get"], url_path="top-categories")
    def top_categories(self, request):  # type: ignore
        return Response(services.top_categories())

    @action(detail=False, methods=["get"], url_path="top-tags")
    def top_tags(self, request):  # type: ignore
        return Response(services.top_tags())

    @action(detail=False, methods=["get"])
    def categories(self, request):  # type: ignore
        return Response(services.product_categories(storefront=True))

    @action(detail=False, methods=["get"], url_path="price-range")
    def price_range(self, request):  # type: ignore
        return Response(services.price_range())
