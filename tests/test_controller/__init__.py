"""
Controller Tests

Tests for dispatch, allocation, status queries and the service facade.
"""
