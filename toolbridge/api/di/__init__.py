"""
Dependency wiring.
"""
