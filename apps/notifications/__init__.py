"""Notifications app package.

Handles email delivery to the owner and customers, WhatsApp message links
and Cloud API sends, the newsletter list, and the Celery tasks that send
scheduled digests.
"""
