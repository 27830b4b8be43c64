"""
Core module for the application.

This module contains the core logic for the application, including the
config, font loading, logo and card rendering, middleware, and utils modules.
"""
