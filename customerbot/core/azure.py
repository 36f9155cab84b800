"""
Shared transport for Azure OpenAI deployments.

Both providers send one JSON POST per call on a caller-owned
aiohttp.ClientSession and differ only in the deployment operation and in how
they read the response.
"""

from typing import Any, Dict, Optional

import aiohttp

from customerbot.config import azure_deployment_url, settings


class AzureDeploymentClient:
    """
    Base for clients of a single Azure OpenAI deployment.

    Subclasses set ``operation`` ("embeddings", "chat/completions") and map
    transport errors to their own failure type.
    """

    operation = ""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        deployment: str,
        timeout_s: float,
        api_key: Optional[str] = None,
        endpoint: Optional[str] = None,
        api_version: Optional[str] = None
    ):
        self._session = session
        self.deployment = deployment
        self.timeout_s = timeout_s
        self.api_key = api_key or settings.azure.api_key
        self.endpoint = endpoint or settings.azure.endpoint
        self.api_version = api_version or settings.azure.api_version

    @property
    def _url(self) -> str:
        return azure_deployment_url(self.endpoint, self.deployment, self.operation, self.api_version)

    @property
    def _headers(self) -> Dict[str, str]:
        return {"api-key": self.api_key, "Content-Type": "application/json"}

    async def _post(self, body: Dict[str, Any]) -> Any:
        """
        POST the body and decode the JSON reply.

        Raises:
            aiohttp.ClientError: Network failure or non-2xx status
            asyncio.TimeoutError: No reply within timeout_s
            ValueError: Reply body is not JSON
        """
        async with self._session.post(
            self._url,
            headers=self._headers,
            json=body,
            timeout=aiohttp.ClientTimeout(total=self.timeout_s)
        ) as response:
            response.raise_for_status()
            return await response.json()
