"""
Taskify: a minimal task tracker with a REST backend and a terminal client.
"""

__version__ = "1.0.0"
