"""
Persistence of AlignedVerificationData.

One JSON file per accepted submission, named
``<first 8 hex chars of the batch root>_<index in batch>.json``. Each call
writes a distinct file, so saves for different submissions may run
concurrently.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Union

from aligned_sdk.protocol.errors import AlignedIOError
from aligned_sdk.protocol.models import AlignedVerificationData
from aligned_sdk.utils.json import json_dumps, json_loads

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def artifact_file_name(data: AlignedVerificationData) -> str:
    return f"{data.batch_merkle_root.hex()[:8]}_{data.index_in_batch}.json"


def ensure_output_dir(directory: PathLike) -> Path:
    path = Path(directory)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise AlignedIOError(path, e) from e
    return path


def save_aligned_verification_data(directory: PathLike, data: AlignedVerificationData) -> Path:
    """
    Write ``data`` into ``directory`` and return the file path.

    The file is written to a temporary sibling first and renamed into place.
    """
    target = Path(directory) / artifact_file_name(data)
    tmp = target.with_name(target.name + ".tmp")
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            f.write(json_dumps(data.to_dict()))
        os.replace(tmp, target)
    except OSError as e:
        raise AlignedIOError(target, e) from e

    logger.info("Batch inclusion data written into %s", target)
    return target


def load_aligned_verification_data(path: PathLike) -> AlignedVerificationData:
    """
    Read a persisted artifact.

    Raises:
        AlignedIOError: If the file cannot be read
        SerializationError: If its content is not a valid artifact
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise AlignedIOError(path, e) from e
    return AlignedVerificationData.from_dict(json_loads(raw))


def read_file(path: PathLike) -> bytes:
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise AlignedIOError(path, e) from e
