"""Core lookup logic — NHTSA clients, record normalization, and orchestration.

This module is framework-agnostic. It has no dependency on MCP, the usage
ledger, or any server framework; the tool layer in ``server.py`` imports
from here.
"""
