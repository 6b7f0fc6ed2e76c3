import hashlib
import json
import logging
import re
import unicodedata
from collections import Counter
from typing import Dict, Optional

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def compute_sha256(text: str) -> str:
    """Compute SHA-256 hash of the raw UTF-8 bytes of a string"""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def normalize_for_palindrome(text: str) -> str:
    """Lower-case, strip diacritics and keep only ASCII letters and digits"""
    decomposed = unicodedata.normalize("NFD", text.lower())
    without_marks = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _NON_ALNUM.sub("", without_marks)


def is_palindrome(text: str) -> bool:
    """Check if string is palindrome (case-insensitive, ignoring punctuation and spaces)"""
    cleaned = normalize_for_palindrome(text)
    return bool(cleaned) and cleaned == cleaned[::-1]


def count_unique_characters(text: str) -> int:
    """Count distinct characters in string (case-sensitive)"""
    return len(set(text))


def count_words(text: str) -> int:
    """Count words separated by whitespace"""
    return len(text.split())


def get_character_frequency(text: str) -> Dict[str, int]:
    """Get frequency map of each character, in order of first occurrence"""
    return dict(Counter(text))


def encode_frequency_map(frequency_map: Dict[str, int]) -> str:
    return json.dumps(frequency_map, ensure_ascii=False)


def decode_frequency_map(raw: Optional[str]) -> Dict[str, int]:
    """
    Decode a stored frequency map.

    Anything that is not a JSON object of single characters to integer counts
    decodes to an empty map instead of failing the read.
    """
    if raw is None:
        return {}
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Discarding malformed character frequency map")
        return {}

    if not isinstance(parsed, dict):
        return {}

    for key, count in parsed.items():
        if not isinstance(count, int) or isinstance(count, bool) or len(key) != 1:
            logger.warning("Discarding character frequency map with invalid entries")
            return {}
    return parsed


def analyze_string(value: str) -> Dict:
    """Analyze a string and return all computed properties"""
    sha256_hash = compute_sha256(value)

    return {
        "id": sha256_hash,
        "value": value,
        "length": len(value),
        "is_palindrome": is_palindrome(value),
        "unique_characters": count_unique_characters(value),
        "word_count": count_words(value),
        "sha256_hash": sha256_hash,
        "character_frequency_map": get_character_frequency(value),
    }
