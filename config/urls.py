"""URL configuration for the Shahzaib Autos API.

Dashboard endpoints require an admin JWT; storefront, checkout, booking form,
contact form and newsletter endpoints are public.
"""
from django.contrib import admin  # type: ignore
from django.urls import path, include  # type: ignore
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView  # type: ignore

from apps.core.views import healthz

# API versioning. v1 is our initial version; future versions can be added here.

urlpatterns = [
    path('admin/', admin.site.urls),
    path('healthz/', healthz, name='healthz'),
    # Dashboard auth, profile and team
    path('api/v1/auth/', include(('apps.users.auth_urls', 'auth'), namespace='auth')),
    path('api/v1/profile/', include('apps.users.urls')),
    path('api/v1/team/', include('apps.users.api.urls')),
    # Catalogue
    path('api/v1/products/', include('apps.catalog.urls')),
    path('api/v1/badges/', include('apps.catalog.badge_urls')),
    path('api/v1/services/', include('apps.services.urls')),
    # Public storefront
    path('api/v1/storefront/services/', include('apps.services.public_urls')),
    path('api/v1/storefront/', include('apps.catalog.storefront_urls')),
    path('api/v1/checkout/', include('apps.orders.checkout_urls')),
    # Sales
    path('api/v1/customers/', include('apps.customers.urls')),
    path('api/v1/orders/', include('apps.orders.urls')),
    path('api/v1/bookings/', include('apps.bookings.urls')),
    path('api/v1/leads/', include('apps.leads.urls')),
    # Notifications and newsletter
    path('api/v1/notifications/', include('apps.notifications.urls')),
    path('api/v1/newsletter/', include('apps.notifications.newsletter_urls')),
    path('api/v1/analytics/', include('apps.analytics.urls')),
    # External scheduler hooks
    path('api/v1/cron/', include('apps.orders.cron_urls')),
    # OpenAPI
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
]
