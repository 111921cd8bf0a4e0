from __future__ import annotations

import hashlib
from pathlib import Path
from urllib.parse import urlparse

import requests

from nix_tts.utils.logger import Logger

DEFAULT_CACHE_DIR = Path.home() / ".cache" / "nix-tts"
DOWNLOAD_TIMEOUT_SECONDS = 120
CHUNK_SIZE = 1024 * 1024


def is_url(endpoint: str) -> bool:
    return urlparse(endpoint).scheme in ("http", "https")


def cached_path(url: str, cache_dir: Path) -> Path:
    """Cache location for a URL: a short hash of the URL plus its file name."""
    name = Path(urlparse(url).path).name or "model.onnx"
    digest = hashlib.sha256(url.encode("utf-8")).hexdigest()[:16]
    return cache_dir / f"{digest}-{name}"


def resolve_model_path(
    endpoint: str,
    *,
    cache_dir: Path = DEFAULT_CACHE_DIR,
    logger: Logger | None = None,
) -> str:
    """Return a local file for a model endpoint, downloading URLs once into the cache."""
    if not is_url(endpoint):
        return endpoint

    dest = cached_path(endpoint, cache_dir)
    if dest.exists():
        if logger:
            logger.log(f"[ONNX] Using cached model: {dest}")
        return str(dest)

    if logger:
        logger.log(f"[ONNX] Downloading {endpoint} -> {dest}")
    download(endpoint, dest)
    return str(dest)


def download(url: str, dest: Path, timeout: int = DOWNLOAD_TIMEOUT_SECONDS) -> None:
    dest.parent.mkdir(parents=True, exist_ok=True)
    tmp = dest.with_suffix(dest.suffix + ".tmp")

    with requests.get(url, stream=True, timeout=timeout) as response:
        response.raise_for_status()
        with open(tmp, "wb") as f:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if not chunk:
                    continue
                f.write(chunk)

    # Only a complete download lands under the final name.
    tmp.replace(dest)
