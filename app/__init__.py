"""
Application layer: configuration, logging and export services.
"""
