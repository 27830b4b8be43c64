"""
API routes module.

This module contains the routes of the API, currently the social card (Open Graph)
image generation.
"""
