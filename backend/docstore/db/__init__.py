"""
Database connection handling and table management.
"""
