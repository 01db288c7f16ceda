"""Startup interval timer."""
