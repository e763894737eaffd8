"""Minimal async client for the Ollama REST API."""

import logging
from typing import Any

import httpx

from learnpath.exceptions import ModelUnavailableError

logger = logging.getLogger(__name__)


class OllamaClient:
    """Async client for a locally hosted Ollama server."""

    def __init__(
        self,
        host: str = "http://localhost:11434",
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.host = host.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.host,
            timeout=httpx.Timeout(self.timeout, connect=10.0),
            transport=self._transport,
        )

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        try:
            async with self._client() as client:
                response = await client.request(method, path, **kwargs)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            body = e.response.text[:500] if e.response.text else ""
            logger.error(f"Ollama {path} returned {e.response.status_code}: {body}")
            raise ModelUnavailableError(
                f"Ollama returned HTTP {e.response.status_code}: {body}", host=self.host
            ) from e
        except (httpx.RequestError, httpx.InvalidURL) as e:
            logger.error(f"Network error connecting to Ollama at {self.host}: {e}")
            raise ModelUnavailableError(
                f"Cannot connect to Ollama at {self.host}: {e}", host=self.host
            ) from e
        except ValueError as e:
            logger.error(f"Ollama {path} returned a non-JSON body: {e}")
            raise ModelUnavailableError(
                f"Unexpected response from Ollama {path}", host=self.host
            ) from e

        if not isinstance(data, dict):
            logger.error(f"Ollama {path} returned {type(data).__name__} instead of an object")
            raise ModelUnavailableError(f"Unexpected response from Ollama {path}", host=self.host)
        return data

    async def list_models(self) -> list[str]:
        """Names of the models installed on the server."""
        data = await self._request("GET", "/api/tags")
        models = data.get("models")
        if not isinstance(models, list):
            return []
        return [m.get("name", "") for m in models if isinstance(m, dict)]

    async def generate(
        self,
        model: str,
        prompt: str,
        temperature: float,
        num_predict: int,
        top_p: float | None = None,
    ) -> str:
        """Run a non-streaming completion and return the generated text."""
        options: dict[str, Any] = {"temperature": temperature, "num_predict": num_predict}
        if top_p is not None:
            options["top_p"] = top_p
        data = await self._request(
            "POST",
            "/api/generate",
            json={"model": model, "prompt": prompt, "options": options, "stream": False},
        )
        return data.get("response", "")
