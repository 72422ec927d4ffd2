"""
Product catalog.

Manages sellable items, their customer reviews and the ratings derived
from them, with text-file and snapshot persistence.
"""
