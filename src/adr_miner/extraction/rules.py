"""Per-language path rules: the single source of truth for architectural signals.

Each rule is (regex on the repository path, signal type, description,
base confidence). Rules are tried in order and every match is kept; the
extractor merges duplicates afterwards.

Adding a new language:
  1. Add its extensions to history/languages.py.
  2. Add a LanguageRules entry to LANGUAGE_RULES below.
"""

import re as _re
from dataclasses import dataclass, field

from ..history.models import Language
from .models import SignalType

Rule = tuple[str, SignalType, str, float]


@dataclass(frozen=True)
class LanguageRules:
    """Everything an extractor needs to know about a language."""

    language: Language
    extensions: tuple[str, ...]

    # Ordered (path regex, signal type, description, base confidence)
    rules: list[Rule] = field(default_factory=list)

    # A changed file matching any of these is treated as an entry point.
    entry_point_patterns: list[str] = field(default_factory=list)

    def compiled_rules(self) -> list[tuple[_re.Pattern, SignalType, str, float]]:
        return [(_re.compile(p), t, d, c) for p, t, d, c in self.rules]

    def compiled_entry_points(self) -> list[_re.Pattern]:
        return [_re.compile(p) for p in self.entry_point_patterns]


# ── Re-usable building blocks ──────────────────────────────────────

_S = SignalType

# "auth" but not "author"
_AUTH_WORDS = r"(auth(?!or)|oauth|jwt|permission|rbac|acl|passport|guard)"

_AUTH_RULE: Rule = (
    rf"(?i)(^|/)[^/]*{_AUTH_WORDS}[^/]*$",
    _S.AUTH_CHANGE,
    "Authentication/authorization code changed",
    0.7,
)
_INTEGRATION_RULE: Rule = (
    r"(?i)(^|/)(integrations?|clients?|adapters?|gateways?|webhooks?)(/|[._-])",
    _S.INTEGRATION_CHANGE,
    "External integration code changed",
    0.6,
)
_ERROR_DIR_RULE: Rule = (
    r"(?i)(^|/)(errors?|exceptions?)(/|\.)",
    _S.ERROR_HANDLING_CHANGE,
    "Error handling code changed",
    0.6,
)
_MIGRATION_RULE: Rule = (
    r"(?i)(^|/)(db/)?migrations?/",
    _S.DATA_MODEL_CHANGE,
    "Database migration",
    0.8,
)


def _web_rules(ext: str) -> list[Rule]:
    """Shared table for TypeScript and JavaScript, parameterised on extension."""
    return [
        (
            rf"(?i)(controller|routes?|router)\.{ext}$",
            _S.API_SURFACE_CHANGE,
            "Controller or route definitions changed",
            0.7,
        ),
        (
            rf"(^|/)pages/api/|(^|/)app/api/.*route\.{ext}$",
            _S.API_SURFACE_CHANGE,
            "API route handler changed",
            0.7,
        ),
        (
            rf"(?i)\.(entity|model|schema)\.{ext}$",
            _S.DATA_MODEL_CHANGE,
            "Entity or schema definition changed",
            0.7,
        ),
        _MIGRATION_RULE,
        (
            rf"(?i)(^|/)(middlewares?|interceptors?)/|middleware\.{ext}$",
            _S.LAYER_CHANGE,
            "Middleware layer changed",
            0.6,
        ),
        (
            r"(?i)(^|/)(services|repositories|providers|domain)/",
            _S.LAYER_CHANGE,
            "Service or domain layer changed",
            0.5,
        ),
        (
            rf"\.module\.{ext}$",
            _S.CONFIG_CHANGE,
            "Module wiring changed",
            0.6,
        ),
        (
            rf"(?i)(^|/)(config|settings)(/|\.{ext}$)",
            _S.CONFIG_CHANGE,
            "Application configuration changed",
            0.5,
        ),
        (
            rf"(^|/)(webpack|vite|rollup|esbuild|babel|next|nuxt)\.config\.{ext}$",
            _S.BUILD_CHANGE,
            "Build tooling configuration changed",
            0.6,
        ),
        (
            rf"(^|/)(jest|vitest|playwright|cypress|karma)\.config\.{ext}$|(^|/)test-utils/",
            _S.TEST_STRATEGY_CHANGE,
            "Test tooling changed",
            0.5,
        ),
        (
            rf"(?i)(^|/)(types|interfaces|contracts)/|\.d\.ts$",
            _S.NEW_ABSTRACTION,
            "Type contracts changed",
            0.5,
        ),
        _ERROR_DIR_RULE,
        _AUTH_RULE,
        _INTEGRATION_RULE,
    ]


def _web_entry_points(ext: str) -> list[str]:
    return [
        rf"(?i)(controller|handler|routes?|router|endpoint|main|index|app|server)\.{ext}$",
        r"(^|/)pages/api/",
    ]


# ── Language definitions ───────────────────────────────────────────

LANGUAGE_RULES: dict[Language, LanguageRules] = {
    Language.TYPESCRIPT: LanguageRules(
        language=Language.TYPESCRIPT,
        extensions=(".ts", ".tsx", ".mts", ".cts"),
        rules=_web_rules(r"[cm]?tsx?"),
        entry_point_patterns=_web_entry_points(r"[cm]?tsx?"),
    ),
    Language.JAVASCRIPT: LanguageRules(
        language=Language.JAVASCRIPT,
        extensions=(".js", ".jsx", ".mjs", ".cjs"),
        rules=_web_rules(r"[cm]?jsx?"),
        entry_point_patterns=_web_entry_points(r"[cm]?jsx?"),
    ),
    Language.PYTHON: LanguageRules(
        language=Language.PYTHON,
        extensions=(".py", ".pyw", ".pyi"),
        rules=[
            (
                r"(^|/)models?(\.py$|/)",
                _S.DATA_MODEL_CHANGE,
                "Data model changed",
                0.7,
            ),
            (r"(^|/)alembic/versions/", _S.DATA_MODEL_CHANGE, "Database migration", 0.8),
            _MIGRATION_RULE,
            (
                r"(^|/)schemas?(\.py$|/)",
                _S.DATA_MODEL_CHANGE,
                "Schema definitions changed",
                0.6,
            ),
            (
                r"(^|/)(views?|routes?|routers?|endpoints?|api)(\.py$|/)",
                _S.API_SURFACE_CHANGE,
                "Views or routes changed",
                0.7,
            ),
            (r"(^|/)urls\.py$", _S.API_SURFACE_CHANGE, "URL routing changed", 0.7),
            (
                r"(^|/)serializers?(\.py$|/)",
                _S.API_SURFACE_CHANGE,
                "Serialization contract changed",
                0.6,
            ),
            (
                r"(^|/)(middleware|services?|repositories|dal)(\.py$|/)",
                _S.LAYER_CHANGE,
                "Service or middleware layer changed",
                0.5,
            ),
            (
                r"(^|/)(settings|config|conf)(\.py$|/)",
                _S.CONFIG_CHANGE,
                "Application settings changed",
                0.6,
            ),
            (
                r"(^|/)(setup|noxfile|tasks|fabfile)\.py$",
                _S.BUILD_CHANGE,
                "Build or task scripts changed",
                0.6,
            ),
            (r"(^|/)conftest\.py$", _S.TEST_STRATEGY_CHANGE, "Test fixtures changed", 0.6),
            (
                r"(^|/)(abc|base|protocols?|interfaces?)\.py$",
                _S.NEW_ABSTRACTION,
                "Abstract base or protocol module changed",
                0.6,
            ),
            _ERROR_DIR_RULE,
            _AUTH_RULE,
            _INTEGRATION_RULE,
        ],
        entry_point_patterns=[
            r"(^|/)(__main__|main|app|wsgi|asgi|manage|cli|server)\.py$",
            r"(^|/)(views?|routes?|routers?|handlers?|endpoints?)\.py$",
        ],
    ),
    Language.JAVA: LanguageRules(
        language=Language.JAVA,
        extensions=(".java",),
        rules=[
            (
                r"(Controller|Resource)\.java$",
                _S.API_SURFACE_CHANGE,
                "Controller or REST resource changed",
                0.8,
            ),
            (
                r"(Entity|Model|Repository|Dao|DAO)\.java$",
                _S.DATA_MODEL_CHANGE,
                "Persistence model or repository changed",
                0.6,
            ),
            (
                r"(^|/)(entity|entities|model|domain)/[^/]+\.java$",
                _S.DATA_MODEL_CHANGE,
                "Domain model changed",
                0.5,
            ),
            (r"Service(Impl)?\.java$", _S.LAYER_CHANGE, "Service layer changed", 0.6),
            (
                r"(Config|Configuration)\.java$",
                _S.CONFIG_CHANGE,
                "Spring configuration changed",
                0.7,
            ),
            (
                r"(Exception|ExceptionHandler|ControllerAdvice)\.java$",
                _S.ERROR_HANDLING_CHANGE,
                "Exception handling changed",
                0.6,
            ),
            (
                r"(Security\w*|Auth\w*|Jwt\w*)\.java$",
                _S.AUTH_CHANGE,
                "Security configuration changed",
                0.7,
            ),
            (
                r"(Client|Gateway|Adapter|Listener|Consumer|Producer)\.java$",
                _S.INTEGRATION_CHANGE,
                "External integration changed",
                0.6,
            ),
            (
                r"(^|/)Abstract\w+\.java$|(Interface|Port|Spi)\.java$",
                _S.NEW_ABSTRACTION,
                "Abstract type or port changed",
                0.6,
            ),
            (
                r"(^|/)src/test/java/.*(TestConfig\w*|TestBase|BaseTest|IT)\.java$",
                _S.TEST_STRATEGY_CHANGE,
                "Test infrastructure changed",
                0.5,
            ),
        ],
        entry_point_patterns=[
            r"\w+Application\.java$",
            r"(^|/)Main\.java$",
            r"(Controller|Resource|Handler|Endpoint)\.java$",
        ],
    ),
    Language.CSHARP: LanguageRules(
        language=Language.CSHARP,
        extensions=(".cs",),
        rules=[
            (r"Controller\.cs$", _S.API_SURFACE_CHANGE, "Controller changed", 0.8),
            (
                r"(^|/)Endpoints?/|(Endpoints?|Hub)\.cs$",
                _S.API_SURFACE_CHANGE,
                "Endpoint or hub changed",
                0.7,
            ),
            (r"DbContext\.cs$", _S.DATA_MODEL_CHANGE, "Data context changed", 0.8),
            (r"(^|/)Migrations/", _S.DATA_MODEL_CHANGE, "Database migration", 0.8),
            (
                r"(^|/)(Models|Entities)/|(Entity|Repository)\.cs$",
                _S.DATA_MODEL_CHANGE,
                "Entity or repository changed",
                0.6,
            ),
            (
                r"(^|/)I[A-Z]\w*\.cs$",
                _S.NEW_ABSTRACTION,
                "Interface changed",
                0.6,
            ),
            (r"(Service|Manager)\.cs$", _S.LAYER_CHANGE, "Service layer changed", 0.5),
            (
                r"(Middleware|Filter)\.cs$",
                _S.LAYER_CHANGE,
                "Request pipeline changed",
                0.6,
            ),
            (
                r"(^|/)(Startup|Program)\.cs$|ServiceCollectionExtensions\.cs$",
                _S.CONFIG_CHANGE,
                "Host or dependency injection setup changed",
                0.7,
            ),
            (
                r"(Exception|ErrorHandler\w*)\.cs$",
                _S.ERROR_HANDLING_CHANGE,
                "Exception handling changed",
                0.6,
            ),
            (
                r"(Auth\w*|Identity\w*|Polic(y|ies))\.cs$",
                _S.AUTH_CHANGE,
                "Authentication or authorization policy changed",
                0.7,
            ),
            (
                r"(Client|Gateway|Adapter|Consumer|Publisher)\.cs$",
                _S.INTEGRATION_CHANGE,
                "External integration changed",
                0.6,
            ),
        ],
        entry_point_patterns=[
            r"(^|/)(Program|Startup)\.cs$",
            r"(Controller|Endpoints?|Hub|Function)\.cs$",
        ],
    ),
    Language.PHP: LanguageRules(
        language=Language.PHP,
        extensions=(".php", ".phtml"),
        rules=[
            (
                r"(^|/)app/Http/Controllers/|Controller\.php$",
                _S.API_SURFACE_CHANGE,
                "Controller changed",
                0.8,
            ),
            (r"(^|/)routes/[^/]+\.php$", _S.API_SURFACE_CHANGE, "Route definitions changed", 0.8),
            (
                r"(^|/)(app/Models|Entity|Entities)/|(Model|Entity|Repository)\.php$",
                _S.DATA_MODEL_CHANGE,
                "Model or repository changed",
                0.6,
            ),
            (r"(^|/)database/migrations/", _S.DATA_MODEL_CHANGE, "Database migration", 0.8),
            (
                r"(^|/)app/Http/Middleware/|Middleware\.php$",
                _S.LAYER_CHANGE,
                "Middleware changed",
                0.6,
            ),
            (
                r"(^|/)app/Services/|Service\.php$",
                _S.LAYER_CHANGE,
                "Service layer changed",
                0.5,
            ),
            (
                r"(^|/)(app/Providers|config)/|ServiceProvider\.php$",
                _S.CONFIG_CHANGE,
                "Service container or config changed",
                0.6,
            ),
            (
                r"(^|/)Contracts/|(Interface|Contract)\.php$",
                _S.NEW_ABSTRACTION,
                "Interface or contract changed",
                0.7,
            ),
            (
                r"(^|/)app/Exceptions/|Exception\.php$",
                _S.ERROR_HANDLING_CHANGE,
                "Exception handling changed",
                0.6,
            ),
            (
                r"(^|/)Policies/|(Policy|Guard|Auth\w*)\.php$",
                _S.AUTH_CHANGE,
                "Authorization policy changed",
                0.7,
            ),
            (
                r"(^|/)tests/TestCase\.php$",
                _S.TEST_STRATEGY_CHANGE,
                "Base test case changed",
                0.5,
            ),
            _INTEGRATION_RULE,
        ],
        entry_point_patterns=[
            r"(^|/)(index|app|artisan)\.php$",
            r"(^|/)bootstrap/app\.php$",
            r"Controller\.php$",
            r"(^|/)routes/",
        ],
    ),
}
