"""
Command handlers for the bytree CLI.
"""
