"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/hasher.py
Content hashing for duplicate detection.

- Full-content digests stream the file in bounded chunks (never read whole)
- SHA-256 by default; xxHash XXH3-128 as a faster alternative
- Front-chunk xxHash64 digest serves as a cheap pre-filter before full hashing
"""

import hashlib
import logging
import os
from typing import Dict, Type, Union

import xxhash

from filesweep.core.interfaces import Digest, HashAlgorithm, Hasher, StoppedFlag
from filesweep.core.models import HashAlgorithmName
from filesweep.errors import HashError, OperationCancelled

logger = logging.getLogger(__name__)

DEFAULT_BLOCK_SIZE = 64 * 1024


class Sha256AlgorithmImpl(HashAlgorithm):
    name = HashAlgorithmName.SHA256.value

    def new(self) -> Digest:
        return hashlib.sha256()


class XXHashAlgorithmImpl(HashAlgorithm):
    """XXH3 with a 128-bit digest: not cryptographic, much faster on large files."""
    name = HashAlgorithmName.XXH128.value

    def new(self) -> Digest:
        return xxhash.xxh3_128()


_ALGORITHMS: Dict[str, Type[HashAlgorithm]] = {
    HashAlgorithmName.SHA256.value: Sha256AlgorithmImpl,
    HashAlgorithmName.XXH128.value: XXHashAlgorithmImpl,
}


def get_algorithm(name: Union[str, HashAlgorithmName]) -> HashAlgorithm:
    key = HashAlgorithmName(name).value
    return _ALGORITHMS[key]()


class ContentHasher(Hasher):
    """
    Computes whole-file digests of paths.
    Stateless per call: safe to share between hashing threads.
    """

    def __init__(self, algorithm: HashAlgorithm = None, block_size: int = DEFAULT_BLOCK_SIZE):
        if block_size <= 0:
            raise ValueError("Block size must be positive")
        self.algorithm = algorithm or Sha256AlgorithmImpl()
        self.block_size = block_size

    def compute_full_hash(self, path: str, stopped_flag: StoppedFlag = None) -> bytes:
        """
        Streams the whole file through the configured digest.

        Raises:
            HashError: file is empty or unreadable
            OperationCancelled: stopped_flag raised between blocks
        """
        digest = self.algorithm.new()
        total = 0
        try:
            with open(path, 'rb') as f:
                if os.fstat(f.fileno()).st_size == 0:
                    raise HashError(path, "file is empty")
                for block in iter(lambda: f.read(self.block_size), b''):
                    if stopped_flag and stopped_flag():
                        raise OperationCancelled(f"Hashing of {path} cancelled")
                    digest.update(block)
                    total += len(block)
        except OSError as e:
            raise HashError(path, e.strerror or str(e)) from e

        if total == 0:
            raise HashError(path, "file is empty")
        return digest.digest()

    def compute_front_hash(self, path: str, chunk_size: int = DEFAULT_BLOCK_SIZE) -> bytes:
        """
        xxHash64 digest of the first chunk_size bytes.

        Raises:
            HashError: file is empty or unreadable
        """
        try:
            with open(path, 'rb') as f:
                chunk = f.read(chunk_size)
        except OSError as e:
            raise HashError(path, e.strerror or str(e)) from e

        if not chunk:
            raise HashError(path, "file is empty")
        return xxhash.xxh64(chunk).digest()
