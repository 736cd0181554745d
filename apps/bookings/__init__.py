"""Bookings app package.

This app encapsulates the booking domain: stay pricing (rate period
decomposition and progressive discounts), availability checks and the
booking lifecycle. Availability-dependent writes run inside database
transactions under a row lock on the property.
"""
