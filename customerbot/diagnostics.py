"""
Azure OpenAI deployment diagnostics.

Sends one small synchronous request to each deployment the bot depends on
and reports the status code, rate-limit headers and any error message.
Used by ``python -m customerbot.cli check`` before starting the server.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

from customerbot.config import Settings, settings as default_settings
from customerbot.logger import get_logger

logger = get_logger(__name__)

EMBEDDING_PROBE = {"input": ["test"]}
CHAT_PROBE = {"messages": [{"role": "user", "content": "Hi"}], "max_tokens": 5}


@dataclass
class DeploymentStatus:
    """
    Outcome of probing one deployment.

    Attributes:
        name: Human readable name ("embeddings", "chat")
        deployment: Deployment name checked
        status_code: HTTP status, or None if the request never completed
        limit_requests / remaining_requests: Request quota headers
        limit_tokens / remaining_tokens: Token quota headers
        retry_after: Retry-After header on 429
        error: Error message, if any
    """
    name: str
    deployment: str
    status_code: Optional[int] = None
    limit_requests: Optional[str] = None
    remaining_requests: Optional[str] = None
    limit_tokens: Optional[str] = None
    remaining_tokens: Optional[str] = None
    retry_after: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status_code == 200

    @property
    def summary(self) -> str:
        """One-line description of the status code."""
        if self.status_code is None:
            return "UNREACHABLE"
        return {
            200: "OK",
            401: "AUTHENTICATION FAILED",
            404: "DEPLOYMENT NOT FOUND",
            429: "RATE LIMITED",
        }.get(self.status_code, f"UNEXPECTED STATUS ({self.status_code})")


def _error_message(response: requests.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(data, dict) and isinstance(data.get("error"), dict):
        return data["error"].get("message") or response.text[:200]
    return response.text[:200]


def check_deployment(
    name: str,
    deployment: str,
    url: str,
    api_key: str,
    payload: Dict[str, Any],
    timeout: float = 30
) -> DeploymentStatus:
    """
    Probe a deployment with a minimal request.

    Never raises for network problems; they are reported in the status.
    """
    status = DeploymentStatus(name=name, deployment=deployment)
    try:
        response = requests.post(
            url,
            headers={"api-key": api_key, "Content-Type": "application/json"},
            json=payload,
            timeout=timeout
        )
    except requests.RequestException as e:
        logger.warning(f"Probe of {name} deployment failed: {e}")
        status.error = str(e)
        return status

    headers = response.headers
    status.status_code = response.status_code
    status.limit_requests = headers.get("x-ratelimit-limit-requests")
    status.remaining_requests = headers.get("x-ratelimit-remaining-requests")
    status.limit_tokens = headers.get("x-ratelimit-limit-tokens")
    status.remaining_tokens = headers.get("x-ratelimit-remaining-tokens")
    status.retry_after = headers.get("retry-after")

    if response.status_code != 200:
        status.error = _error_message(response)

    return status


def check_all(settings: Optional[Settings] = None) -> List[DeploymentStatus]:
    """Probe the embedding and chat deployments."""
    settings = settings or default_settings
    azure = settings.azure
    azure.validate()

    return [
        check_deployment(
            "embeddings", azure.embedding_deployment, azure.embedding_url,
            azure.api_key, EMBEDDING_PROBE
        ),
        check_deployment(
            "chat", azure.chat_deployment, azure.chat_url,
            azure.api_key, CHAT_PROBE
        ),
    ]
