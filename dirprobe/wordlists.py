import logging
from pathlib import Path
from typing import Iterable, List, Sequence, Union

from .errors import WordlistError

log = logging.getLogger("dirprobe.wordlists")


def read_wordlist(path: Union[str, Path]) -> List[str]:
    """
    Read a wordlist into trimmed, non-empty lines.
    Lines starting with '#' (after trimming) are comments and skipped.
    Order and duplicates are kept as they appear in the file.
    """
    p = Path(path)
    words: List[str] = []
    try:
        with p.open("r", encoding="utf-8") as f:
            for line in f:
                s = line.strip()
                if not s or s.startswith("#"):
                    continue
                words.append(s)
    except (OSError, UnicodeDecodeError) as e:
        raise WordlistError(str(p), str(e)) from e
    log.info("Loaded %d words from %s", len(words), p)
    return words


def _clean_word(word: str) -> str:
    return word.strip().lstrip("/")


def build_targets(base: str, words: Iterable[str], extensions: Sequence[str]) -> List[str]:
    """
    Expand every word into the URLs to probe, in order.

    Each word yields its as-is URL first. Bare names (no '/' and no '.')
    additionally yield one URL per extension, in extension order; anything
    that looks like a directory or already has a dot is never suffixed.
    Words that are empty after trimming and dropping leading '/' yield
    nothing. `base` must already be normalized (scheme + trailing '/').
    """
    targets: List[str] = []
    for word in words:
        w = _clean_word(word)
        if not w:
            continue

        contains_slash = "/" in w
        ends_with_slash = w.endswith("/")
        has_dot = "." in w
        is_directory_like = contains_slash or ends_with_slash

        targets.append(base + w)
        if not is_directory_like and not has_dot:
            for ext in extensions:
                targets.append(base + w + ext)
    return targets
