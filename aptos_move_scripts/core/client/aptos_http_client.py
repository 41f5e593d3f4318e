"""
Aptos Fullnode HTTP API Client
For reading deployed module ABIs
"""
import aiohttp
import asyncio
import json
import logging
from typing import Any, Dict, Optional

from ...utils.exceptions import AbiNotFoundError, AptosApiError, NodeConnectionError

LOG = logging.getLogger(__name__)


class AptosHttpClient:
    """Aptos Fullnode REST API Client"""

    def __init__(self, base_url: str, timeout: float = 30.0):
        """
        Initialize HTTP client

        Args:
            base_url: Fullnode REST base URL, including the /v1 prefix
            timeout: Total request timeout (seconds)
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        """Async context manager entry"""
        self.session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.timeout)
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        if self.session:
            await self.session.close()
            self.session = None

    def module_url(self, address: str, module_name: str) -> str:
        """URL of a module resource under an account"""
        return f"{self.base_url}/accounts/{address}/module/{module_name}"

    async def get_module(self, address: str, module_name: str) -> Dict[str, Any]:
        """
        Get a deployed module

        Args:
            address: Account address the module is published under
            module_name: Module name

        Returns:
            Decoded JSON body ({"bytecode": ..., "abi": {...}})

        Raises:
            NodeConnectionError: Transport failure or timeout
            AptosApiError: Non-200 status, or body is not UTF-8 JSON
        """
        url = self.module_url(address, module_name)
        LOG.debug(f"Getting module {module_name} from {url}")

        if not self.session:
            raise RuntimeError("Client not initialized. Use 'async with' statement.")

        try:
            async with self.session.get(url) as resp:
                body = await resp.read()
                if resp.status != 200:
                    text = body.decode("utf-8", errors="replace")
                    raise AptosApiError(
                        f"Failed to get module {module_name}: {resp.status} - {text}",
                        code=resp.status,
                    )
        except aiohttp.ClientError as e:
            raise NodeConnectionError(f"HTTP request failed: {e}", url=url)
        except asyncio.TimeoutError:
            raise NodeConnectionError(
                f"HTTP request timed out after {self.timeout}s", url=url
            )

        try:
            return json.loads(body.decode("utf-8"))
        except (ValueError, RecursionError) as e:
            # UnicodeDecodeError and JSONDecodeError are both ValueErrors
            raise AptosApiError(
                f"Invalid JSON in response for module {module_name}: {e}",
                code=resp.status,
            )

    async def get_module_abi(self, address: str, module_name: str) -> Any:
        """
        Get the ABI of a deployed module

        Returns:
            The "abi" value of the module response, untouched

        Raises:
            AbiNotFoundError: Response has no "abi" field
        """
        data = await self.get_module(address, module_name)
        if not isinstance(data, dict) or "abi" not in data:
            raise AbiNotFoundError(
                f"Response for module {module_name} has no 'abi' field",
                code=200,
            )
        return data["abi"]
