"""
Module ABI fetcher

Downloads the ABI of each listed module from a fullnode and writes it out as
a generated TypeScript constant, one file per module:

    export const CPMM_ABI = {...} as const;

Design Notes:
- A fixed grace period runs before the first request so that a module
  published moments ago is visible on the node
- All modules are fetched concurrently and the run waits for every one
- A failing module is logged and reported in its FetchResult; it never
  stops the others and is never retried
"""

import asyncio
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Sequence, Union

from .client.aptos_http_client import AptosHttpClient
from ..utils.exceptions import AptosScriptError

LOG = logging.getLogger(__name__)

DEFAULT_GRACE_PERIOD = 5.0
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class ModuleRef:
    """One deployed module"""
    address: str
    name: str


@dataclass
class FetchResult:
    """Outcome of fetching and writing one module's ABI"""
    module: ModuleRef
    path: Path
    success: bool = False
    error: Optional[str] = None


def abi_constant_name(module_name: str) -> str:
    return f"{module_name.upper()}_ABI"


def abi_file_name(module_name: str) -> str:
    return f"{module_name}_abi.ts"


def render_abi_module(module_name: str, abi: Any) -> str:
    """Render the TypeScript source holding a module's ABI"""
    # Same shape as JSON.stringify: no whitespace, non-ASCII left as is
    abi_json = json.dumps(abi, separators=(",", ":"), ensure_ascii=False)
    return f"export const {abi_constant_name(module_name)} = {abi_json} as const;"


class AbiFetcher:
    """Fetch module ABIs from a fullnode and write them as TypeScript files"""

    def __init__(
        self,
        base_url: str,
        output_dir: Union[str, Path],
        grace_period: float = DEFAULT_GRACE_PERIOD,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """
        Args:
            base_url: Fullnode REST base URL
            output_dir: Directory the generated files are written to
            grace_period: Seconds to wait before the first request
            timeout: Total HTTP timeout per session (seconds)
        """
        self.base_url = base_url
        self.output_dir = Path(output_dir)
        self.grace_period = grace_period
        self.timeout = timeout

    def output_path(self, module: ModuleRef) -> Path:
        return self.output_dir / abi_file_name(module.name)

    async def run(self, modules: Sequence[ModuleRef]) -> List[FetchResult]:
        """
        Fetch and write every module's ABI.

        Returns:
            One FetchResult per module, in input order
        """
        if not modules:
            LOG.info("No modules to fetch")
            return []

        await self._wait_for_grace_period()

        async with AptosHttpClient(self.base_url, timeout=self.timeout) as client:
            results = await asyncio.gather(
                *(self._fetch_and_write(client, module) for module in modules)
            )

        failed = [r.module.name for r in results if not r.success]
        if failed:
            LOG.warning(f"ABI fetch failed for {len(failed)}/{len(results)} modules: {failed}")
        else:
            LOG.info(f"Fetched {len(results)} module ABIs")
        return list(results)

    async def _wait_for_grace_period(self) -> None:
        if self.grace_period > 0:
            LOG.info(f"Waiting {self.grace_period}s for modules to become queryable...")
            await asyncio.sleep(self.grace_period)

    async def _fetch_and_write(self, client: AptosHttpClient, module: ModuleRef) -> FetchResult:
        path = self.output_path(module)
        result = FetchResult(module=module, path=path)
        try:
            abi = await client.get_module_abi(module.address, module.name)
            self._write(path, render_abi_module(module.name, abi))
        except (AptosScriptError, OSError) as e:
            LOG.error(f"Error fetching ABI for {module.name}: {e}")
            result.error = str(e)
            return result
        except Exception as e:
            LOG.error(f"Unexpected error fetching ABI for {module.name}: {e}", exc_info=True)
            result.error = f"{type(e).__name__}: {e}"
            return result

        LOG.info(f"{module.name} ABI saved to {path}")
        result.success = True
        return result

    def _write(self, path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
