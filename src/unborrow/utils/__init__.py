"""
Utility helpers: console/logging setup and source rendering.
"""
