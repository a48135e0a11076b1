"""
PanLoadMonitor - Utilities Package

Configuration and logging helpers.
"""
