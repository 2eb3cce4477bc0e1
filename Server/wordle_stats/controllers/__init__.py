"""
Controllers Package

Contains the Flask blueprints exposing the HTTP endpoints.
"""
