"""
Configuration package for the product catalog.
"""
