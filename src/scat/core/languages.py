import re
from pathlib import Path

_LANGUAGE_ALIASES = {
    "bash": "bash",
    "c#": "csharp",
    "csharp": "csharp",
    "cpp": "cpp",
    "c++": "cpp",
    "cs": "csharp",
    "css": "css",
    "dockerfile": "dockerfile",
    "go": "go",
    "golang": "go",
    "hcl": "hcl",
    "html": "html",
    "java": "java",
    "javascript": "javascript",
    "js": "javascript",
    "json": "json",
    "lua": "lua",
    "make": "make",
    "makefile": "make",
    "md": "markdown",
    "markdown": "markdown",
    "php": "php",
    "plist": "xml",
    "python": "python",
    "py": "python",
    "rb": "ruby",
    "ruby": "ruby",
    "rs": "rust",
    "rust": "rust",
    "sh": "bash",
    "shell": "bash",
    "sql": "sql",
    "svg": "xml",
    "terraform": "terraform",
    "tf": "terraform",
    "toml": "toml",
    "ts": "typescript",
    "tsx": "tsx",
    "typescript": "typescript",
    "xhtml": "xml",
    "xml": "xml",
    "yaml": "yaml",
    "yml": "yaml",
    "zsh": "bash",
    "c": "c",
}

_EXTENSION_LANGUAGE_MAP = {
    ".bash": "bash",
    ".c": "c",
    ".cc": "cpp",
    ".cpp": "cpp",
    ".cs": "csharp",
    ".cxx": "cpp",
    ".go": "go",
    ".h": "c",
    ".hcl": "hcl",
    ".hh": "cpp",
    ".hpp": "cpp",
    ".htm": "html",
    ".html": "html",
    ".java": "java",
    ".js": "javascript",
    ".json": "json",
    ".jsx": "javascript",
    ".lua": "lua",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".md": "markdown",
    ".markdown": "markdown",
    ".mk": "make",
    ".php": "php",
    ".plist": "xml",
    ".py": "python",
    ".pyi": "python",
    ".rb": "ruby",
    ".rs": "rust",
    ".scss": "css",
    ".css": "css",
    ".sh": "bash",
    ".sql": "sql",
    ".svg": "xml",
    ".tf": "terraform",
    ".tfvars": "terraform",
    ".toml": "toml",
    ".ts": "typescript",
    ".tsx": "tsx",
    ".xml": "xml",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".zsh": "bash",
}

_FILENAME_LANGUAGE_MAP = {
    ".bashrc": "bash",
    ".zshrc": "bash",
    "Cargo.lock": "toml",
    "Dockerfile": "dockerfile",
    "GNUmakefile": "make",
    "Gemfile": "ruby",
    "Makefile": "make",
    "Pipfile": "toml",
    "Rakefile": "ruby",
    "makefile": "make",
    "poetry.lock": "toml",
}

_SHEBANG_INTERPRETERS = {
    "bash": "bash",
    "dash": "bash",
    "lua": "lua",
    "node": "javascript",
    "php": "php",
    "python": "python",
    "ruby": "ruby",
    "sh": "bash",
    "zsh": "bash",
}

_SHEBANG_RE = re.compile(r"^#!\s*(\S+)(?:\s+(\S+))?")
_VERSION_SUFFIX_RE = re.compile(r"[\d.]+$")

_SUPPORTED_LANGUAGES = set(_LANGUAGE_ALIASES.values())


def supported_languages() -> list[str]:
    return sorted(_SUPPORTED_LANGUAGES)


def normalize_language(language: str) -> str:
    normalized = language.strip().lower()
    resolved = _LANGUAGE_ALIASES.get(normalized, normalized)
    if resolved not in _SUPPORTED_LANGUAGES:
        raise ValueError(f"Unsupported language '{language}'. Supported: {supported_languages()}")
    return resolved


def detect_language_from_path(file_path: Path) -> str | None:
    if file_path.name in _FILENAME_LANGUAGE_MAP:
        return _FILENAME_LANGUAGE_MAP[file_path.name]
    if file_path.name.startswith("Dockerfile."):
        return "dockerfile"
    return _EXTENSION_LANGUAGE_MAP.get(file_path.suffix.lower())


def detect_language_from_shebang(content: bytes) -> str | None:
    first_line = content.split(b"\n", 1)[0].decode("utf-8", errors="replace")
    match = _SHEBANG_RE.match(first_line)
    if match is None:
        return None
    interpreter = Path(match.group(1)).name
    if interpreter == "env" and match.group(2):
        interpreter = match.group(2)
    interpreter = _VERSION_SUFFIX_RE.sub("", interpreter)
    return _SHEBANG_INTERPRETERS.get(interpreter)


def resolve_language(language: str | None, file_path: Path | None, content: bytes = b"") -> str | None:
    """Pick the highlighting language: override, then filename, then shebang.

    Returns None when nothing matches; the file is then shown unhighlighted.
    """
    if language:
        return normalize_language(language)
    if file_path is not None:
        detected = detect_language_from_path(file_path)
        if detected is not None:
            return detected
    return detect_language_from_shebang(content)
