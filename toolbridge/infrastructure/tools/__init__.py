"""
Sandbox, extraction and prompt infrastructure.
"""
