"""Corpus service - knowledge base document loading and caching."""

import asyncio
import logging
import os
import re
from pathlib import Path
from typing import AsyncIterator, Optional

from ..exceptions import InvalidPathError
from ..models.document import KnowledgeDocument

logger = logging.getLogger(__name__)

_HEADING_RE = re.compile(r"^#\s+(.+)$", re.MULTILINE)
_YAML_NAME_RE = re.compile(r"^name:\s*[\"']?(.+?)[\"']?\s*$", re.MULTILINE)
_WORD_START_RE = re.compile(r"\b\w")


def extract_title(content: str, file_path: str) -> str:
    """Extract title from markdown heading, YAML name field or filename.

    Args:
        content: Document text.
        file_path: Path used for the filename fallback.

    Returns:
        Document title.
    """
    heading = _HEADING_RE.search(content)
    if heading:
        return heading.group(1).strip()

    yaml_name = _YAML_NAME_RE.search(content)
    if yaml_name:
        return yaml_name.group(1).strip()

    stem = Path(file_path).stem.replace("-", " ")
    return _WORD_START_RE.sub(lambda m: m.group(0).upper(), stem)


class CorpusLoader:
    """Walks the knowledge base directory and caches documents by path."""

    def __init__(
        self,
        root: str | Path,
        min_content_length: int = 10,
        loader: Optional["TextLoader"] = None,
    ):
        """Initialize corpus loader.

        Args:
            root: Knowledge base root directory.
            min_content_length: Files with less stripped text are skipped.
            loader: File loader (defaults to TextLoader).
        """
        self._root = Path(root)
        self._min_content_length = min_content_length
        self._loader = loader
        self._cache: dict[str, KnowledgeDocument] = {}

    @property
    def root(self) -> Path:
        return self._root

    @property
    def loader(self):
        """Lazy load file loader."""
        if self._loader is None:
            from kb_retrieval.infrastructure.document_loaders import TextLoader

            self._loader = TextLoader()
        return self._loader

    @property
    def cached_paths(self) -> list[str]:
        return list(self._cache)

    async def load_all(self) -> list[KnowledgeDocument]:
        """Load every eligible document under the root.

        Cached documents are returned without re-reading. Unreadable files
        are skipped; an inaccessible root yields an empty list.

        Returns:
            Documents in traversal order.
        """
        documents: list[KnowledgeDocument] = []

        async for file_path in self._walk(self._root):
            if not self.loader.supports(file_path):
                continue

            relative_path = file_path.relative_to(self._root).as_posix()

            cached = self._cache.get(relative_path)
            if cached is not None:
                documents.append(cached)
                continue

            try:
                content = await asyncio.to_thread(self.loader.load, file_path)
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"Error reading file {file_path}: {e}")
                continue

            # Placeholders such as .gitkeep-style stubs
            if len(content.strip()) < self._min_content_length:
                logger.debug(f"Skip near-empty file: {relative_path}")
                continue

            doc = KnowledgeDocument(
                path=relative_path,
                title=extract_title(content, relative_path),
                content=content,
            )
            self._cache[relative_path] = doc
            documents.append(doc)

        return documents

    @staticmethod
    def _list_entries(directory: Path) -> list[tuple[Path, bool, bool]]:
        """List (path, is_dir, is_file) sorted by name; symlinks count as neither."""
        with os.scandir(directory) as it:
            entries = [
                (
                    Path(entry.path),
                    entry.is_dir(follow_symlinks=False),
                    entry.is_file(follow_symlinks=False),
                )
                for entry in it
            ]
        return sorted(entries, key=lambda e: e[0].name)

    async def _walk(self, directory: Path) -> AsyncIterator[Path]:
        """Yield files recursively, skipping hidden directories and symlinks."""
        try:
            entries = await asyncio.to_thread(self._list_entries, directory)
        except OSError:
            logger.warning(f"Directory not accessible: {directory}")
            return

        for path, is_dir, is_file in entries:
            if is_dir:
                if not path.name.startswith("."):
                    async for file_path in self._walk(path):
                        yield file_path
            elif is_file:
                yield path

    async def load_document(self, relative_path: str) -> Optional[KnowledgeDocument]:
        """Load a single document by path relative to the root.

        Args:
            relative_path: Path inside the knowledge base.

        Returns:
            The document, or None if it cannot be read.

        Raises:
            InvalidPathError: If the path points outside the root.
        """
        if "\x00" in relative_path:
            raise InvalidPathError(relative_path)

        normalized = os.path.normpath(relative_path)
        if ".." in Path(normalized).parts or os.path.isabs(normalized):
            raise InvalidPathError(relative_path)

        root = self._root.resolve()
        try:
            full_path = (root / normalized).resolve()
        except (OSError, ValueError) as e:
            raise InvalidPathError(relative_path) from e
        if not full_path.is_relative_to(root):
            raise InvalidPathError(relative_path)

        try:
            content = await asyncio.to_thread(self.loader.load, full_path)
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Error loading document {relative_path}: {e}")
            return None

        return KnowledgeDocument(
            path=relative_path,
            title=extract_title(content, relative_path),
            content=content,
        )

    def clear_cache(self) -> None:
        """Drop all cached documents."""
        self._cache.clear()
