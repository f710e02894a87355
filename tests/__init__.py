"""Test suite for the apictl package.

This package contains unit and integration tests validating template
resolution, body encoding, response addressing, assertions, run
orchestration, configuration loading, the command-line interface and
the pytest integration.
"""
