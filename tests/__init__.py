"""Test suite for the pytest-page-content package.

This package contains unit and integration tests validating chain
declaration, execution ordering, expectation semantics and the pytest
integration of page content fixtures.
"""
