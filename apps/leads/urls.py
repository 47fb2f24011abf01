from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import ContactFormView, LeadViewSet

router = DefaultRouter()
router.register(r'', LeadViewSet, basename='lead')

urlpatterns = [
    path('contact/', ContactFormView.as_view(), name='lead-contact'),
    path('', include(router.urls)),
]
