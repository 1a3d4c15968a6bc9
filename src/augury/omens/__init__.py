"""
Omens - Decoded node responses.

Immutable result types and the JSON schemas responses are checked against.
"""
