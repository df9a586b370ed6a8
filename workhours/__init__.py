"""
workhours - unavailable hours for calendar timelines from provider working hours.
"""

__version__ = "0.1.0"
