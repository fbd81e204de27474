"""File classification tables: language, test, config and docs patterns.

Adding a language:
  1. Add its extensions to EXTENSIONS below.
  2. Add a LanguageRules entry in extraction/rules.py.
"""

import re as _re
from pathlib import PurePosixPath

from .models import Language

EXTENSIONS: dict[str, Language] = {
    # TypeScript
    ".ts": Language.TYPESCRIPT,
    ".tsx": Language.TYPESCRIPT,
    ".mts": Language.TYPESCRIPT,
    ".cts": Language.TYPESCRIPT,
    # JavaScript
    ".js": Language.JAVASCRIPT,
    ".jsx": Language.JAVASCRIPT,
    ".mjs": Language.JAVASCRIPT,
    ".cjs": Language.JAVASCRIPT,
    # Python
    ".py": Language.PYTHON,
    ".pyw": Language.PYTHON,
    ".pyi": Language.PYTHON,
    # Java
    ".java": Language.JAVA,
    # C#
    ".cs": Language.CSHARP,
    # PHP
    ".php": Language.PHP,
    ".phtml": Language.PHP,
}

_TEST_PATTERNS = [
    _re.compile(p, f)
    for p, f in (
        (r"\.test\.[jt]sx?$", 0),
        (r"\.spec\.[jt]sx?$", 0),
        (r"_test\.py$", 0),
        (r"(^|/)test_[^/]*\.py$", 0),
        (r"Tests?\.java$", 0),
        (r"Tests?\.cs$", 0),
        (r"Tests?\.php$", 0),
        (r"__tests__/", 0),
        (r"(^|/)tests?/", _re.IGNORECASE),
        (r"(^|/)spec/", _re.IGNORECASE),
    )
]

_CONFIG_PATTERNS = [
    _re.compile(p)
    for p in (
        r"\.config\.[jt]s$",
        r"\.json$",
        r"\.ya?ml$",
        r"\.toml$",
        r"\.ini$",
        r"\.cfg$",
        r"\.env",
        r"Dockerfile",
        r"docker-compose",
        r"\.gitignore$",
        r"\.eslintrc",
        r"\.prettierrc",
        r"tsconfig",
        r"requirements[^/]*\.txt$",
        r"Pipfile",
        r"pom\.xml$",
        r"build\.gradle",
        r"\.csproj$",
    )
]

_DOCS_PATTERNS = [
    _re.compile(p, _re.IGNORECASE)
    for p in (
        r"\.md$",
        r"\.mdx$",
        r"\.rst$",
        r"\.txt$",
        r"README",
        r"CHANGELOG",
        r"LICENSE",
        r"CONTRIBUTING",
        r"(^|/)docs?/",
    )
]

# Dependency manifests by file name. .csproj is matched by suffix.
MANIFESTS: dict[str, str] = {
    "package.json": "npm",
    "requirements.txt": "pip",
    "pyproject.toml": "pip",
    "Pipfile": "pip",
    "pom.xml": "maven",
    "build.gradle": "gradle",
    "build.gradle.kts": "gradle",
    "composer.json": "composer",
}


def detect_language(path: str) -> Language:
    """Map a repository path to a Language.

    Source extensions win; everything else is config, docs or other.
    """
    suffix = PurePosixPath(path).suffix.lower()
    language = EXTENSIONS.get(suffix)
    if language is not None:
        return language
    if is_config_path(path):
        return Language.CONFIG
    if is_docs_path(path):
        return Language.DOCS
    return Language.OTHER


def is_test_path(path: str) -> bool:
    return any(p.search(path) for p in _TEST_PATTERNS)


def is_config_path(path: str) -> bool:
    # requirements.txt is config, not docs
    return any(p.search(path) for p in _CONFIG_PATTERNS)


def is_docs_path(path: str) -> bool:
    return any(p.search(path) for p in _DOCS_PATTERNS)


def manifest_type(path: str) -> str | None:
    """Return the ecosystem of a dependency manifest, or None."""
    name = PurePosixPath(path).name
    if name in MANIFESTS:
        return MANIFESTS[name]
    if name.startswith("requirements") and name.endswith(".txt"):
        return "pip"
    if name.endswith(".csproj"):
        return "nuget"
    return None
