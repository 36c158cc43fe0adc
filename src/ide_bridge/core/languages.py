from pathlib import PurePath

_EXTENSION_LANGUAGE_MAP = {
    ".c": "c",
    ".cc": "cpp",
    ".cpp": "cpp",
    ".cs": "csharp",
    ".cxx": "cpp",
    ".go": "go",
    ".h": "c",
    ".hh": "cpp",
    ".hpp": "cpp",
    ".htm": "html",
    ".html": "html",
    ".java": "java",
    ".js": "javascript",
    ".json": "json",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".md": "markdown",
    ".markdown": "markdown",
    ".py": "python",
    ".rb": "ruby",
    ".rs": "rust",
    ".scss": "css",
    ".css": "css",
    ".toml": "toml",
    ".ts": "typescript",
    ".tsx": "tsx",
    ".yaml": "yaml",
    ".yml": "yaml",
}

_LANGUAGE_DISPLAY_NAMES = {
    "c": "C",
    "cpp": "C++",
    "csharp": "C#",
    "css": "CSS",
    "go": "Go",
    "html": "HTML",
    "java": "Java",
    "javascript": "JavaScript",
    "json": "JSON",
    "markdown": "Markdown",
    "python": "Python",
    "ruby": "Ruby",
    "rust": "Rust",
    "toml": "TOML",
    "tsx": "TypeScript JSX",
    "typescript": "TypeScript",
    "yaml": "YAML",
}

UNKNOWN_LANGUAGE = "Unknown"


def detect_language_from_path(file_path: str | PurePath) -> str | None:
    """Return the parser language id for *file_path*, or ``None`` if unsupported."""
    return _EXTENSION_LANGUAGE_MAP.get(PurePath(file_path).suffix.lower())


def display_name_for_path(file_path: str | PurePath | None) -> str:
    """Human-readable language name: known display name, else upper-cased extension, else ``Unknown``."""
    if not file_path:
        return UNKNOWN_LANGUAGE
    language = detect_language_from_path(file_path)
    if language is not None:
        return _LANGUAGE_DISPLAY_NAMES[language]
    suffix = PurePath(file_path).suffix.lstrip(".")
    return suffix.upper() if suffix else UNKNOWN_LANGUAGE
