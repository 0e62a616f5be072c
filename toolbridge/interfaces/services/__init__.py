"""
Ports consumed by the composition layer.
"""
