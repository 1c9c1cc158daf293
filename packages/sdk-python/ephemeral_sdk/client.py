"""Ephemeral Chain API client."""

import requests
from typing import Optional


class EphemeralChainClient:
    """Client for the Ephemeral Chain API."""

    def __init__(self, base_url: str = "http://localhost:3001", timeout: float = 10.0):
        """Initialize client."""
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    def _request(self, method: str, path: str, **kwargs) -> dict:
        response = self.session.request(
            method, f"{self.base_url}{path}", timeout=self.timeout, **kwargs
        )
        response.raise_for_status()
        return response.json()

    def get_state(self) -> dict:
        """Get current chain head and counters."""
        return self._request("GET", "/api/state")

    def submit_transaction(
        self,
        sender: str,
        recipient: str,
        amount: float,
        signature: str,
        asset: Optional[str] = None,
    ) -> dict:
        """Submit a transfer to the ephemeral pool."""
        payload = {
            "from": sender,
            "to": recipient,
            "amount": amount,
            "signature": signature,
        }
        if asset:
            payload["asset"] = asset
        return self._request("POST", "/api/transaction", json=payload)

    def get_balance(self, address: str, private_key: Optional[str] = None) -> dict:
        """Get balance for an address."""
        payload = {"address": address}
        if private_key:
            payload["privateKey"] = private_key
        return self._request("POST", "/api/balance", json=payload)

    def get_transaction_pool(self) -> dict:
        """Get redacted pending transactions."""
        return self._request("GET", "/api/txpool")

    def generate_effect_proof(
        self,
        recipient: str,
        amount: float,
        nullifier: str,
        token: Optional[str] = None,
    ) -> dict:
        """Request an effect proof for a bridge withdrawal."""
        payload = {
            "recipient": recipient,
            "amount": amount,
            "nullifier": nullifier,
        }
        if token:
            payload["token"] = token
        return self._request("POST", "/api/effect-proof", json=payload)

    def cleanup(self, older_than: Optional[int] = None) -> dict:
        """Purge processed transactions older than a cutoff (epoch ms)."""
        params = {"olderThan": older_than} if older_than is not None else None
        return self._request("DELETE", "/api/cleanup", params=params)

    def health(self) -> dict:
        """Check service health."""
        return self._request("GET", "/health")
