"""
Shared Kernel

Base classes and value objects shared by the booking and finance contexts.
Following DDD principles, this is the foundation for all domain models.
"""