"""Tests for history/languages.py - path classification tables."""

import pytest

from adr_miner.history.languages import (
    detect_language,
    is_config_path,
    is_docs_path,
    is_test_path,
    manifest_type,
)
from adr_miner.history.models import Language


class TestDetectLanguage:
    """Test detect_language function."""

    @pytest.mark.parametrize(
        "path, expected",
        [
            ("src/app.ts", Language.TYPESCRIPT),
            ("src/App.tsx", Language.TYPESCRIPT),
            ("lib/index.mjs", Language.JAVASCRIPT),
            ("pkg/service.py", Language.PYTHON),
            ("stubs/api.pyi", Language.PYTHON),
            ("src/main/java/com/acme/App.java", Language.JAVA),
            ("Api/Program.cs", Language.CSHARP),
            ("app/Http/Kernel.php", Language.PHP),
        ],
    )
    def test_source_extensions(self, path, expected):
        """Source extensions map to their language."""
        assert detect_language(path) == expected

    def test_manifests_are_config(self):
        """Manifests and tool configs classify as config."""
        assert detect_language("package.json") == Language.CONFIG
        assert detect_language("requirements-dev.txt") == Language.CONFIG
        assert detect_language("deploy/Dockerfile") == Language.CONFIG

    def test_docs(self):
        """Markdown and docs directories classify as docs."""
        assert detect_language("README.md") == Language.DOCS
        assert detect_language("docs/guide.rst") == Language.DOCS

    def test_unknown_is_other(self):
        """Unrecognised files fall through to other."""
        assert detect_language("assets/logo.png") == Language.OTHER

    def test_source_wins_over_docs_dir(self):
        """A source file under docs/ is still source."""
        assert detect_language("docs/conf.py") == Language.PYTHON

    def test_is_source_property(self):
        """Only real programming languages count as source."""
        assert Language.PYTHON.is_source
        assert not Language.CONFIG.is_source
        assert not Language.MIXED.is_source


class TestPathPredicates:
    """Test is_test_path / is_config_path / is_docs_path."""

    @pytest.mark.parametrize(
        "path",
        [
            "src/user.test.ts",
            "src/user.spec.js",
            "pkg/test_models.py",
            "pkg/models_test.py",
            "src/test/java/UserServiceTest.java",
            "src/__tests__/button.tsx",
            "tests/integration/helpers.py",
        ],
    )
    def test_test_paths(self, path):
        assert is_test_path(path)

    def test_non_test_paths(self):
        assert not is_test_path("src/latest.py")
        assert not is_test_path("src/contest/rules.ts")

    def test_config_paths(self):
        assert is_config_path("tsconfig.json")
        assert is_config_path(".github/workflows/ci.yml")
        assert not is_config_path("src/app.ts")

    def test_docs_paths(self):
        assert is_docs_path("CHANGELOG.md")
        assert not is_docs_path("src/app.ts")


class TestManifestType:
    """Test manifest_type function."""

    @pytest.mark.parametrize(
        "path, ecosystem",
        [
            ("package.json", "npm"),
            ("web/package.json", "npm"),
            ("requirements.txt", "pip"),
            ("requirements-dev.txt", "pip"),
            ("pyproject.toml", "pip"),
            ("pom.xml", "maven"),
            ("build.gradle.kts", "gradle"),
            ("composer.json", "composer"),
            ("src/Api/Api.csproj", "nuget"),
        ],
    )
    def test_known_manifests(self, path, ecosystem):
        assert manifest_type(path) == ecosystem

    def test_not_a_manifest(self):
        assert manifest_type("src/package.ts") is None
        assert manifest_type("tsconfig.json") is None
