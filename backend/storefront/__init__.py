"""
Storefront Backend

Domain models, repositories and HTTP API for a small commerce backend.

Author: TM3
Date: 2025-10-17
"""
__version__ = "1.0.0"
