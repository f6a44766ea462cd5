"""Core (pure) library layer.

This package is UI-agnostic and safe to import from:
- the Streamlit entrypoint
- the diagnostics API and CLI
- tests

It should not import Streamlit or trigger side effects at import time.
"""
