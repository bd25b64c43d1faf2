"""Headless client for the NamingOps API.

Mirrors server state the way the web UI does (loading/error flags, staleness
checks, draft auto-save) so the behaviour can be driven from Python.
"""
