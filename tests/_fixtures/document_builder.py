"""Helper utilities for writing throwaway documents and configs in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Mapping

from mdxport.models import ScanResult
from mdxport.scanning.scanner import ComponentScanner


class DocumentBuilder:
    """Writes MDX documents (and optionally ``.mdxport.yml``) into a temp directory."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "docs"
        self.root.mkdir()
        self._scanner = ComponentScanner()

    def write(self, files: Mapping[str, str]) -> None:
        """Write ``path -> contents`` entries under the docs root."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def scan(self, relative: str) -> ScanResult:
        """Scan one written document with a default scanner."""
        return self._scanner.scan((self.root / relative).read_text(encoding="utf-8"))

    def path(self, relative: str = "") -> Path:
        return self.root / relative if relative else self.root


__all__ = ["DocumentBuilder"]
