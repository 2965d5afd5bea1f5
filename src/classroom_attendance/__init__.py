"""Classroom face attendance package.

This package is organized by feature modules (roster, sessions, sync, storage, ...)
with a thin Flask controller layer on the server side and an asyncio-driven
session engine on the client side.
"""
