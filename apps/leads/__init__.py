"""Leads app package: contact form enquiries and their follow-up status."""
