"""Top-level package for Django configuration.

Contains settings modules for the different environments and the WSGI and
ASGI entry points of the booking engine.
"""
