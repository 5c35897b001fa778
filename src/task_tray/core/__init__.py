"""Ports, application state and the UI dispatcher."""
