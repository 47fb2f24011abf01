"""URL routing for analytics endpoints."""

from django.urls import path  # type: ignore

from .views import (
    BookingDistributionView,
    DashboardStatsView,
    ExportReportView,
    RecentActivityView,
    RevenueView,
    SummaryView,
    TopProductsView,
)

urlpatterns = [
    # Do not prefix with 'analytics/' here; the prefix is defined in config.urls
    path('dashboard/', DashboardStatsView.as_view(), name='analytics-dashboard'),
    path('recent-activity/', RecentActivityView.as_view(), name='analytics-recent-activity'),
    path('revenue/', RevenueView.as_view(), name='analytics-revenue'),
    path('top-products/', TopProductsView.as_view(), name='analytics-top-products'),
    path('booking-distribution/', BookingDistributionView.as_view(), name='analytics-booking-distribution'),
    path('summary/', SummaryView.as_view(), name='analytics-summary'),
    path('export/', ExportReportView.as_view(), name='analytics-export'),
]
