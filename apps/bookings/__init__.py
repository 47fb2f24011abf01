"""Bookings app package.

Service appointments made from the public booking form, the unified
checkout or the dashboard, together with the slot rules that decide which
times can still be booked.
"""
