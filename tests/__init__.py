# OneAI (c) 2025 Ajay Rajput
# Licensed under Business Source License 1.1 – see LICENSE for details.
"""
Test package for OneAI.

This package contains test suites for:
- Unit tests for core components (credentials, normalizer, degradation)
- Router and vendor adapter tests
- Capability service scenarios
- HTTP API tests
"""

__version__ = "1.0.0"
__author__ = "OneAI Team"
