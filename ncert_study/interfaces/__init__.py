"""
Interfaces module - User-facing interfaces for the NCERT Study Library.

This module provides:
1. CLI interface for terminal use
2. Web interface using FastAPI
"""
