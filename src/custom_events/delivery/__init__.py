"""
Package: delivery
Description: Event delivery mechanisms for the custom events client.

Provides URL building, request encoding, response classification,
the retrying EventSender and result reporting.
"""
