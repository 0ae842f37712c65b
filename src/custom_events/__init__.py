"""
Package: custom_events
Description: Client for posting custom session events to an appliance.

Import EventSender from custom_events.delivery.sender and the models
from custom_events.models.
"""

__version__ = "0.1.0"
