"""Properties app package.

This app encapsulates rental units and their tiered nightly, weekly and
monthly rates, plus the quote and availability lookups exposed per unit.
"""
