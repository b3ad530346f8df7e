"""Business logic services.

This package contains the upstream API client and the service that turns
inbound lookups into upstream calls and client-facing outcomes.
"""
