# OneAI (c) 2025 Ajay Rajput
# Licensed under Business Source License 1.1 – see LICENSE for details.
"""
Core components for OneAI.

This package holds the pieces every request flows through: the exception
hierarchy, credential resolution, response normalization, the degradation
policy and the concurrent fan-out helper.
"""
