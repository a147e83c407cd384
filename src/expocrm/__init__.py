"""
ExpoCRM

Backend for capturing, enriching and following up leads met at events.
"""
__version__ = "0.1.0"
