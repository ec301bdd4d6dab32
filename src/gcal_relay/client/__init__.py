"""Desktop client: relay HTTP client, state and controller."""
from gcal_relay.client.controller import AppController
from gcal_relay.client.relay_client import RelayClient

__all__ = ['AppController', 'RelayClient']
