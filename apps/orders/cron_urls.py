from django.urls import path  # type: ignore

from .views import CheckStaleOrdersView

urlpatterns = [
    path('check-stale-orders/', CheckStaleOrdersView.as_view(), name='cron-check-stale-orders'),
]
