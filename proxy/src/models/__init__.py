"""Data models for the holiday proxy.

This package contains Pydantic models for request/response validation
and the tagged result of an upstream call.
"""
