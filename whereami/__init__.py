"""
whereami - where is this app running, and where is its visitor?
"""

__version__ = "1.0.0"
