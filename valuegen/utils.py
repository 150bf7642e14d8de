"""Loading descriptor documents and writing generated sources.

Descriptor documents are JSON. They can come from a local file, a URL or a
text stream such as stdin.
"""

import json
import sys
from pathlib import Path
from typing import Any, TextIO
from urllib.parse import urlparse

import requests

from .logging_config import get_logger

logger = get_logger(__name__)


class DescriptorLoadError(Exception):
    """Raised when a descriptor document cannot be read or parsed."""

    pass


def load_descriptors_from_file(file_path: str | Path) -> tuple[str, Any]:
    """Load a descriptor document from a local file.

    Args:
        file_path: Path to the JSON file.

    Returns:
        Tuple of (source description, parsed JSON data).

    Raises:
        FileNotFoundError: If file doesn't exist.
        DescriptorLoadError: If file cannot be read or JSON is invalid.
    """
    file_path = Path(file_path)
    logger.debug(f"Loading descriptors from file: {file_path}")

    if not file_path.exists():
        logger.error(f"File not found: {file_path}")
        raise FileNotFoundError(f"File not found: {file_path}")

    if file_path.suffix.lower() != ".json":
        logger.warning(f"Descriptor file does not have .json extension: {file_path}")

    try:
        with file_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in descriptor file {file_path}: {e}")
        raise DescriptorLoadError(f"Invalid JSON in file {file_path}: {e}") from e
    except OSError as e:
        logger.error(f"Error reading descriptor file {file_path}: {e}")
        raise DescriptorLoadError(f"Error reading file {file_path}: {e}") from e

    logger.info(f"Loaded descriptors from {file_path}")
    return str(file_path), data


def load_descriptors_from_url(url: str, timeout: int = 30) -> tuple[str, Any]:
    """Fetch a descriptor document over HTTP(S).

    Args:
        url: URL serving the JSON document.
        timeout: Request timeout in seconds.

    Raises:
        DescriptorLoadError: If the URL is invalid, the request fails, or the
            response isn't valid JSON.
    """
    logger.debug(f"Loading descriptors from URL: {url}")

    parsed_url = urlparse(url)
    if not all([parsed_url.scheme, parsed_url.netloc]):
        logger.error(f"Invalid URL format: {url}")
        raise DescriptorLoadError(f"Invalid URL: {url}")

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
        data = response.json()
    except requests.exceptions.Timeout as e:
        logger.error(f"Request timeout for URL: {url}")
        raise DescriptorLoadError(f"Request timeout for URL: {url}") from e
    except requests.exceptions.HTTPError as e:
        status = e.response.status_code if e.response is not None else "?"
        logger.error(f"HTTP error {status} for URL: {url}")
        raise DescriptorLoadError(f"HTTP error {status} for URL: {url}") from e
    except requests.exceptions.RequestException as e:
        logger.error(f"Request error for URL {url}: {e}")
        raise DescriptorLoadError(f"Request error for URL {url}: {e}") from e
    except ValueError as e:
        # requests raises a ValueError subclass for undecodable bodies
        logger.error(f"Invalid JSON response from URL {url}: {e}")
        raise DescriptorLoadError(f"Invalid JSON response from URL {url}: {e}") from e

    logger.info(f"Loaded descriptors from {url}")
    return url, data


def load_descriptors_from_stream(stream: TextIO, name: str = "<stdin>") -> tuple[str, Any]:
    """Read a descriptor document from an open text stream."""
    try:
        data = json.load(stream)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON on {name}: {e}")
        raise DescriptorLoadError(f"Invalid JSON on {name}: {e}") from e
    return name, data


def load_descriptors(
    file_path: str | Path | None = None,
    url: str | None = None,
    timeout: int = 30,
    stream: TextIO | None = None,
) -> tuple[str, Any]:
    """Load a descriptor document from exactly one source.

    A ``file_path`` of ``"-"`` reads from ``stream`` (stdin by default).

    Returns:
        Tuple of (source description, parsed JSON data).

    Raises:
        DescriptorLoadError: If neither or both sources are given, or loading fails.
        FileNotFoundError: If the file doesn't exist.
    """
    if not file_path and not url:
        raise DescriptorLoadError("Either file_path or url must be provided")

    if file_path and url:
        raise DescriptorLoadError("Cannot specify both file_path and url")

    if url:
        return load_descriptors_from_url(url, timeout)
    if str(file_path) == "-":
        return load_descriptors_from_stream(stream or sys.stdin)
    return load_descriptors_from_file(file_path)


def write_source(output_dir: str | Path, relative_path: str | Path, code: str) -> Path:
    """Write one generated file below ``output_dir``, creating directories.

    Raises:
        OSError: If the file cannot be written.
    """
    path = Path(output_dir) / relative_path
    path.parent.mkdir(parents=True, exist_ok=True)
    # newline="" keeps the configured line endings as rendered
    with path.open("w", encoding="utf-8", newline="") as f:
        f.write(code)
    logger.debug(f"Wrote {path}")
    return path
