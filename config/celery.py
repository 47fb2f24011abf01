import os

from celery import Celery
from celery.schedules import crontab  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("shahzaib_autos")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

app.conf.beat_schedule = {
    # NEW orders older than STALE_ORDER_HOURS become STALE, admin gets one summary
    "check-stale-orders": {
        "task": "orders.check_stale_orders",
        "schedule": crontab(minute=0, hour=10),
    },
    # Reminders for tomorrow's confirmed bookings
    "send-booking-reminders": {
        "task": "bookings.send_booking_reminders",
        "schedule": crontab(minute=0, hour=18),
    },
    "send-low-stock-alert": {
        "task": "notifications.send_low_stock_alert",
        "schedule": crontab(minute=30, hour=9),
    },
    "send-daily-summary": {
        "task": "notifications.send_daily_summary",
        "schedule": crontab(minute=0, hour=21),
    },
}

app.conf.timezone = "Asia/Karachi"
