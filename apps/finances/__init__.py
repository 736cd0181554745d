"""Finances app package.

This app contains payments taken against a booking's period schedule,
the sequential payment rule and the cash/bank ledger written when a
payment is confirmed.
"""
