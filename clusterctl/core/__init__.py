"""
Core Infrastructure.

Configuration, logging, exceptions and resilience shared by every module.
"""
