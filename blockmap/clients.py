"""
boto3 client construction, one client per service and invocation.
"""
from typing import Any, Dict

import boto3
from botocore.exceptions import BotoCoreError

from blockmap.config import Settings
from blockmap.errors import ExternalCallFailure


class ClientFactory:
    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self._session = None
        self._clients: Dict[str, Any] = {}

    def _get_session(self) -> boto3.session.Session:
        if self._session is None:
            self._session = boto3.session.Session(
                profile_name=self.settings.profile,
                region_name=self.settings.region,
            )
        return self._session

    def get(self, service: str) -> Any:
        """Return the cached client for ``service``, building it on first use."""
        if service not in self._clients:
            # No region and unknown profiles surface here, not at call time.
            try:
                self._clients[service] = self._get_session().client(service)
            except BotoCoreError as exc:
                raise ExternalCallFailure(f"creating {service} client", exc) from exc
        return self._clients[service]
