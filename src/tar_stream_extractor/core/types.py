"""Configuration types for tar extraction."""

from dataclasses import dataclass

BLOCK_SIZE = 512
BUFFER_SIZE = 4096


@dataclass(frozen=True)
class ExtractConfig:
    """Tuning knobs for one archive walk."""

    block_size: int = BLOCK_SIZE
    buffer_size: int = BUFFER_SIZE
    encoding: str = "utf-8"
    errors: str = "surrogateescape"
    digest_algorithm: str = "sha1"
    chunk_size: int = 64 * 1024

    def __post_init__(self) -> None:
        if self.block_size <= 0:
            raise ValueError(f"block_size must be positive: {self.block_size}")
        # The buffer must hold at least one full header record.
        if self.buffer_size < max(self.block_size, BLOCK_SIZE) or (
            self.buffer_size % self.block_size
        ):
            raise ValueError(
                f"buffer_size ({self.buffer_size}) must be a positive multiple "
                f"of block_size ({self.block_size}) and at least {BLOCK_SIZE}"
            )
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive: {self.chunk_size}")
