from django.urls import path  # type: ignore

from .views import CheckoutView, UnifiedCheckoutView

urlpatterns = [
    path('', CheckoutView.as_view(), name='checkout'),
    path('unified/', UnifiedCheckoutView.as_view(), name='checkout-unified'),
]
