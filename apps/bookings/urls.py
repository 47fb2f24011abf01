from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import AvailableSlotsView, BookingSettingsView, BookingViewSet, PublicBookingView

router = DefaultRouter()
router.register(r'', BookingViewSet, basename='booking')

urlpatterns = [
    path('public/', PublicBookingView.as_view(), name='booking-public'),
    path('slots/', AvailableSlotsView.as_view(), name='booking-slots'),
    path('settings/', BookingSettingsView.as_view(), name='booking-settings'),
    path('', include(router.urls)),
]
