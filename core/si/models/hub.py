"""
Thin client over huggingface_hub used by the catalog engine.
"""

import asyncio
from pathlib import Path
from typing import Optional

from huggingface_hub import HfApi, hf_hub_download, try_to_load_from_cache

from si.models.errors import RemoteError
from si.utils.logging import logger


class HubClient:
    """
    List, download and locate model files in the Hugging Face hub cache.

    Network calls are blocking in huggingface_hub, so the async methods run
    them in the default executor.
    """

    def __init__(self, cache_dir: Path | None = None, token: str | None = None):
        self.cache_dir = cache_dir
        self.token = token
        self.api = HfApi(token=token)

    async def get_remote_file_list(self, model_id: str) -> list[str]:
        """
        Get the names of all files in a model repository.

        Raises:
            RemoteError: If the repository info cannot be fetched
        """
        loop = asyncio.get_running_loop()
        try:
            info = await loop.run_in_executor(None, lambda: self.api.model_info(model_id))
        except Exception as e:
            raise RemoteError(f"Failed to get info for `{model_id}`: {e}", model_id) from e

        return [sibling.rfilename for sibling in (info.siblings or [])]

    async def download_file(self, model_id: str, filename: str) -> Path:
        """
        Download one file into the hub cache.

        Returns:
            Local path of the downloaded file

        Raises:
            RemoteError: If the download fails
        """
        loop = asyncio.get_running_loop()
        logger.debug(f"Downloading {model_id}/{filename}")
        try:
            local_path = await loop.run_in_executor(
                None,
                lambda: hf_hub_download(
                    model_id, filename, cache_dir=self.cache_dir, token=self.token
                ),
            )
        except Exception as e:
            raise RemoteError(
                f"{filename} download failed for `{model_id}`: {e}", model_id, filename
            ) from e

        return Path(local_path)

    def resolve_local_path(
        self, model_id: str, filename: str, cache_dir: Path | None = None
    ) -> Optional[Path]:
        """
        Find a file in the local cache without touching the network.

        Returns:
            Path to the cached file, or None if it is not cached
        """
        cached = try_to_load_from_cache(
            model_id, filename, cache_dir=cache_dir or self.cache_dir
        )
        # try_to_load_from_cache returns a sentinel object for known-missing files
        if not isinstance(cached, str):
            return None

        path = Path(cached)
        return path if path.exists() else None
