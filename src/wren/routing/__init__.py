"""Routing — URI parsing, the namespace registry, and handler resolution.

The registry and handler tables are built when the app freezes and are
read-only while requests are served.
"""
