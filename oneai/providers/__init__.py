# OneAI (c) 2025 Ajay Rajput
# Licensed under Business Source License 1.1 – see LICENSE for details.
"""
Vendor adapters for OneAI.

One adapter per upstream vendor; ``registry`` holds the static provider
table and builds adapters from a credential snapshot.
"""

from .base import VendorAdapter
from .registry import PROVIDERS, ProviderDescriptor, create_adapter, get_descriptor

__all__ = [
    "PROVIDERS",
    "ProviderDescriptor",
    "VendorAdapter",
    "create_adapter",
    "get_descriptor",
]
