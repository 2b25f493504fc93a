"""
Steam Box markdown updater
- Splices a titled ```text block between two HTML comment markers
- Leaves everything outside the markers byte-for-byte untouched
- Re-running with the same lines gives the same file (idempotent)

Writes are not locked; only one process should update a given file at a time.
"""

import logging
import os

from errors import DocumentIOError, MarkerNotFoundError, MarkerOrderError

logger = logging.getLogger(__name__)

START_MARKER = "<!-- steam-box start -->"
END_MARKER = "<!-- steam-box end -->"
ATTRIBUTION = "<!-- Powered by https://github.com/YouEclipse/steam-box . -->"

# -------------------------------------------------------------------------
# Helpers
# -------------------------------------------------------------------------

def read(path):
    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentIOError(f"Error reading {path}: {e}") from e


def write(path, content):
    try:
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(content)
    except (OSError, UnicodeEncodeError) as e:
        raise DocumentIOError(f"Error writing {path}: {e}") from e
    logger.info("  ✓ Wrote %s", os.path.basename(path))


def gist_title_link(gist_id: str, title: str) -> str:
    """Markdown heading linking back to the gist the lines came from."""
    return f'#### <a href="https://gist.github.com/{gist_id}" target="_blank">{title}</a>'


# -------------------------------------------------------------------------
# Region replace
# -------------------------------------------------------------------------

def _find_once(doc: str, marker: str) -> int:
    idx = doc.find(marker)
    if idx == -1:
        raise MarkerNotFoundError(marker)
    if doc.find(marker, idx + len(marker)) != -1:
        raise MarkerNotFoundError(marker, f"Marker appears more than once: {marker!r}")
    return idx


def render_block(title: str, lines: list[str], attribution: str = ATTRIBUTION) -> str:
    """The text that goes between the markers."""
    body = "\n".join(lines)
    return f"\n{title}\n```text\n{body}\n```\n{attribution}\n"


def patch_region(doc: str, title: str, lines: list[str],
                 start: str = START_MARKER, end: str = END_MARKER,
                 attribution: str = ATTRIBUTION) -> str:
    """
    Replace whatever sits between *start* and *end* with a fresh block.
    The start marker is kept and the end marker begins the untouched tail.
    Both markers must occur exactly once, start before end.
    """
    start_idx = _find_once(doc, start)
    end_idx = _find_once(doc, end)
    before = doc[:start_idx + len(start)]
    if end_idx < len(before):
        raise MarkerOrderError(end, f"End marker {end!r} comes before start marker {start!r}")
    after = doc[end_idx:]
    return before + render_block(title, lines, attribution) + after


def update_markdown(path, title: str, lines: list[str],
                    start: str = START_MARKER, end: str = END_MARKER) -> bool:
    """
    Patch the marker region of an existing file in place.
    Returns True when the file changed. Never creates the file.
    """
    md = read(path)
    updated = patch_region(md, title, lines, start, end)
    if updated == md:
        logger.info("  %s already up to date", os.path.basename(path))
        return False
    write(path, updated)
    return True
