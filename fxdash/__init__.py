"""
FX Dashboard - Currency Display Core

Currency conversion and rate caching for a personal finance dashboard.
All amounts are stored in a single base currency; this package turns them
into the user's display currency and back.

DESIGN PRINCIPLES:
1. Never block the UI on the network
2. A present-but-approximate number beats a crashed widget
3. The cache is an optimization, never the source of truth
4. Every refresh attempt is logged
5. Storage and network layers are swappable
"""

__version__ = "1.0.0"
__author__ = "FX Dashboard Team"
