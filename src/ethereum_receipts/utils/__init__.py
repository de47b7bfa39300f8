"""
Utility functions used throughout this package.
"""
