"""
Ledgerline Package - Simple re-export from records

This allows both import styles:
- from ledgerline import RecordHandler
- from ledgerline.records import RecordHandler
"""

# Re-export everything from records submodule
from .records import *
from .records import __all__ as _records_all

# Ensure __all__ is properly set
__all__ = _records_all
