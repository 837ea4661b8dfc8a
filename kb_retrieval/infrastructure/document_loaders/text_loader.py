from pathlib import Path


class TextLoader:
    """Reads markdown and YAML knowledge files."""

    EXTENSIONS = {".md", ".yaml", ".yml"}

    def __init__(self, encoding: str = "utf-8-sig"):
        # utf-8-sig drops a leading BOM so "# Title" on line one still matches
        self._encoding = encoding

    def supports(self, file_path: Path) -> bool:
        return file_path.suffix.lower() in self.EXTENSIONS

    def load(self, file_path: Path) -> str:
        # newline="" keeps line endings as written
        with open(file_path, encoding=self._encoding, newline="") as f:
            return f.read()
