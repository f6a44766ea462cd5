"""Thin Streamlit layer.

This package:
- owns the per-session UISession stored in st.session_state
- runs the session entry point once per browser session
- renders whatever the session script installed

Script loading and invocation live in touchui.scripting / touchui.session.
"""
