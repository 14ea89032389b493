import logging
import re
from pathlib import Path
from typing import List, Optional

from ..entish.engine.config import config
from ..entish.engine.errors import SourceError

logger = logging.getLogger(__name__)


class SourceLoader:
    """
    Reads Entish rule text from disk.

    - `.ent` files are Entish source as a whole.
    - `.md` files contribute the body of every fenced code block tagged with
      the configured language (```entish by default), in document order.

    Relative paths resolve against `base_path` (the working directory when
    it is None).
    """

    def __init__(self, base_path: Optional[str] = None, language: Optional[str] = None) -> None:
        self.base_path = base_path if base_path is not None else config.get("sources.base_path")
        self.language = language or config.get("sources.markdown_language", "entish")

    def resolve(self, path: str) -> Path:
        resolved = Path(path)
        if self.base_path and not resolved.is_absolute():
            resolved = Path(self.base_path) / resolved
        return resolved

    def read(self, path: str) -> List[str]:
        resolved = self.resolve(path)
        suffix = resolved.suffix.lower()
        if suffix not in (".ent", ".md"):
            raise SourceError(f"unknown file type {suffix.lstrip('.') or path!r}")

        try:
            with open(resolved, "r", encoding="utf-8") as f:
                text = f.read()
        except OSError as e:
            raise SourceError(f"cannot read {resolved}: {e}") from e

        if suffix == ".ent":
            logger.debug(f"[SOURCE] {resolved}: entish file")
            return [text]

        blocks = self.code_blocks(text)
        logger.debug(f"[SOURCE] {resolved}: {len(blocks)} {self.language} block(s)")
        return blocks

    def code_blocks(self, markdown: str) -> List[str]:
        pattern = r'^```[ \t]*' + re.escape(self.language) + r'[ \t]*\n(.*?)^```'
        return re.findall(pattern, markdown, re.DOTALL | re.MULTILINE | re.IGNORECASE)
