"""Helper functions for common operations."""

import random
import string
from typing import Dict, List

# One process-wide source, seeded once from the OS
_key_random = random.SystemRandom()

KEY_PREFIX_ALPHABET = string.ascii_uppercase


def random_key_prefix(length: int = 5) -> str:
    """Generate a random upper-case prefix used to disambiguate object keys."""
    return "".join(_key_random.choice(KEY_PREFIX_ALPHABET) for _ in range(length))


def generate_object_key(filename: str, randomize: bool = True, prefix_length: int = 5) -> str:
    """
    Derive the storage key for an uploaded file.
    Format: PREFIX_filename, or the filename unchanged when randomize is off.
    """
    if not randomize:
        return filename
    return f"{random_key_prefix(prefix_length)}_{filename}"


def part_numbers(total_parts: int) -> List[int]:
    """Return the 1-based part numbers for a multipart upload."""
    return list(range(1, total_parts + 1))


def as_completed_parts(parts: List[Dict]) -> List[Dict]:
    """
    Convert completed part descriptors into the S3 ``MultipartUpload.Parts`` shape.
    Parts are sorted by part number, which S3 requires.
    """
    return [
        {"PartNumber": part["part_number"], "ETag": part["etag"]}
        for part in sorted(parts, key=lambda x: x["part_number"])
    ]
