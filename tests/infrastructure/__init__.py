"""Test infrastructure - mocks and helpers.

This package contains test support code, NOT actual tests.
"""
