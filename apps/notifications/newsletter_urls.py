"""URL routing for the newsletter (public subscribe/unsubscribe, admin list)."""

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import NewsletterSubscribeView, NewsletterSubscriberViewSet, newsletter_unsubscribe

router = DefaultRouter()
router.register(r'subscribers', NewsletterSubscriberViewSet, basename='newsletter-subscriber')

urlpatterns = [
    path('subscribe/', NewsletterSubscribeView.as_view(), name='newsletter-subscribe'),
    path('unsubscribe/', newsletter_unsubscribe, name='newsletter-unsubscribe'),
    path('', include(router.urls)),
]
