"""
Core configuration, dependencies and exceptions
"""
