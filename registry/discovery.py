# =============================================================================
# registry/discovery.py - Discovery & Registration Engine
# =============================================================================
# Finds model types at startup without a hand-maintained list.
#
# Convention:
#   payloads/<name>.py     - the pydantic data shape for records of <name>
#   validations/<name>.py  - the validator that checks those records
#
# For each <name> present in BOTH packages:
#   1. Resolve the shape class by trying conventional names, then by
#      scanning the module source for BaseModel subclasses
#   2. Resolve the validator by trying a factory function and conventional
#      class names, then call it with no arguments
#   3. Register a ModelInfo in the store
#
# A name that can't be resolved is logged and recorded in the report.
# Discovery never raises: one broken pair must not take down startup.
#
# Usage:
#   report = discover_and_register_all(store)
#   print(report.registered, report.errors, report.skipped)
# =============================================================================

from __future__ import annotations

import ast
import importlib
import inspect
import logging
import pkgutil
from dataclasses import dataclass, field
from types import ModuleType
from typing import Any

from pydantic import BaseModel

from core.models.model_info import ModelInfo
from lib.utils import to_display_words, to_title_case
from registry.store import ModelStore

logger = logging.getLogger(__name__)

# Names whose conventional class-name casing isn't plain title case
CASING_OVERRIDES: dict[str, str] = {
    "github": "GitHub",
    "gitlab": "GitLab",
    "api": "API",
    "db": "DB",
    "http": "HTTP",
    "json": "JSON",
    "xml": "XML",
    "url": "URL",
}

SHAPE_SUFFIXES = ("Payload", "Model", "Request", "Data", "")

# Modules in either package that never describe a model type
IGNORED_MODULES = {"base", "conftest"}

# Contextual listing metadata for well-known types: (display name, tags)
KNOWN_MODEL_METADATA: dict[str, tuple[str, tuple[str, ...]]] = {
    "github": ("GitHub Webhook", ("webhook", "github", "git", "collaboration")),
    "api": ("API Request/Response", ("api", "http", "rest", "web")),
    "database": ("Database Operations", ("database", "sql", "transaction", "query")),
    "generic": ("Generic Payload", ("generic", "flexible", "json", "general")),
    "deployment": ("Deployment Webhook", ("deployment", "webhook", "devops", "ci/cd")),
    "incident": ("Incident Report", ("incident", "operations", "monitoring", "alerting")),
    "gitlab": ("GitLab Webhook", ("webhook", "gitlab", "git", "collaboration")),
    "bitbucket": ("Bitbucket Webhook", ("webhook", "bitbucket", "git", "collaboration")),
    "slack": ("Slack Message", ("messaging", "slack", "communication")),
}


# =============================================================================
# Errors
# =============================================================================

class DiscoveryError(Exception):
    """A model type could not be discovered. Logged, never fatal."""

    def __init__(self, base_name: str, message: str):
        self.base_name = base_name
        self.message = message
        super().__init__(f"{base_name}: {message}")


class ShapeNotFoundError(DiscoveryError):
    """No pydantic data shape found for a base name."""

    def __init__(self, base_name: str, attempted: list[str]):
        self.attempted = attempted
        super().__init__(
            base_name,
            f"no data shape found (tried {', '.join(attempted)} and a source scan)",
        )


class ValidatorNotFoundError(DiscoveryError):
    """No validator constructor found for a base name."""

    def __init__(self, base_name: str, attempted: list[str]):
        self.attempted = attempted
        super().__init__(
            base_name,
            f"no validator found (tried {', '.join(attempted)})",
        )


@dataclass
class DiscoveryReport:
    """Outcome of one discovery run."""

    registered: int = 0
    errors: list[DiscoveryError] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


# =============================================================================
# Naming conventions
# =============================================================================

def title_variants(base_name: str) -> list[str]:
    """Override casing first (if any), then plain title case."""
    variants = []
    override = CASING_OVERRIDES.get(base_name.lower())
    if override:
        variants.append(override)
    plain = to_title_case(base_name)
    if plain and plain not in variants:
        variants.append(plain)
    return variants


def shape_candidates(base_name: str) -> list[str]:
    """
    Class names tried, in order, for the data shape.

    Example:
        shape_candidates("api")
        # ["APIPayload", "APIModel", "APIRequest", "APIData", "API",
        #  "ApiPayload", "ApiModel", "ApiRequest", "ApiData", "Api"]
    """
    return [f"{title}{suffix}" for title in title_variants(base_name) for suffix in SHAPE_SUFFIXES]


def validator_candidates(base_name: str) -> list[str]:
    """Factory and class names tried, in order, for the validator."""
    candidates = [f"new_{base_name}_validator"]
    override = CASING_OVERRIDES.get(base_name.lower())
    if override:
        candidates.append(f"{override}Validator")
    candidates.append(f"{to_title_case(base_name)}Validator")
    candidates.append(f"{base_name.upper()}Validator")

    # Keep order, drop duplicates
    return list(dict.fromkeys(candidates))


def is_shape_class(obj: Any) -> bool:
    return inspect.isclass(obj) and issubclass(obj, BaseModel) and obj is not BaseModel


def scan_model_classes(module: ModuleType) -> list[str]:
    """
    Names of pydantic models declared in a module, in source order.

    Reads the module's source with ast rather than trusting dir(), so
    imported models are ignored.
    """
    try:
        source = inspect.getsource(module)
    except (OSError, TypeError):
        logger.debug(f"No source available for {module.__name__}")
        return []

    names = []
    for node in ast.parse(source).body:
        if isinstance(node, ast.ClassDef) and is_shape_class(getattr(module, node.name, None)):
            names.append(node.name)
    return names


def display_name_for(base_name: str) -> str:
    known = KNOWN_MODEL_METADATA.get(base_name.lower())
    if known:
        return known[0]
    return f"{to_display_words(base_name)} Validation"


def description_for(base_name: str, shape: type[BaseModel]) -> str:
    return (
        f"{display_name_for(base_name)} validation with business rules "
        f"(auto-discovered from {shape.__name__})"
    )


def tags_for(base_name: str) -> tuple[str, ...]:
    tags = ["auto-discovered", base_name.lower()]
    known = KNOWN_MODEL_METADATA.get(base_name.lower())
    if known:
        tags.extend(known[1])
    return tuple(dict.fromkeys(tags))


# =============================================================================
# Engine
# =============================================================================

class DiscoveryEngine:
    """
    Pairs modules of a models package with modules of a validations
    package and registers each resolved pair in a ModelStore.
    """

    def __init__(
        self,
        store: ModelStore,
        models_package: str = "payloads",
        validations_package: str = "validations",
    ):
        self.store = store
        self.models_package = models_package
        self.validations_package = validations_package

    def discover_and_register_all(self) -> DiscoveryReport:
        """
        Discover every model/validator pair and register it.

        Returns:
            DiscoveryReport with the number registered, per-type errors
            and base names present in only one package
        """
        report = DiscoveryReport()

        try:
            model_names = self.list_module_names(self.models_package)
            validator_names = self.list_module_names(self.validations_package)
        except ImportError as e:
            logger.error(f"Model discovery aborted: {e}")
            report.errors.append(DiscoveryError("*", f"cannot import package: {e}"))
            return report

        for name in sorted(model_names ^ validator_names):
            side = self.models_package if name in model_names else self.validations_package
            logger.info(f"Skipping '{name}': only found in {side}")
            report.skipped.append(name)

        for base_name in sorted(model_names & validator_names):
            try:
                info = self.discover_one(base_name)
            except DiscoveryError as e:
                logger.warning(f"Discovery failed for '{base_name}': {e.message}")
                report.errors.append(e)
                continue

            self.store.register(info)
            report.registered += 1

        logger.info(
            f"Discovery complete: {report.registered} registered, "
            f"{len(report.errors)} failed, {len(report.skipped)} skipped"
        )
        return report

    def discover_one(self, base_name: str) -> ModelInfo:
        """
        Resolve one base name into a ModelInfo.

        Raises:
            DiscoveryError: If either module can't be imported, or no
                shape or validator can be resolved
        """
        models_module = self._import(self.models_package, base_name)
        validations_module = self._import(self.validations_package, base_name)

        shape = self.resolve_shape(base_name, models_module)
        validator = self.resolve_validator(base_name, validations_module)

        return ModelInfo(
            type_name=base_name,
            display_name=display_name_for(base_name),
            description=description_for(base_name, shape),
            data_shape=shape,
            validator=validator,
            tags=tags_for(base_name),
        )

    # -------------------------------------------------------------------------
    # Resolution
    # -------------------------------------------------------------------------

    def resolve_shape(self, base_name: str, module: ModuleType) -> type[BaseModel]:
        attempted = shape_candidates(base_name)
        for name in attempted:
            candidate = getattr(module, name, None)
            if is_shape_class(candidate):
                logger.debug(f"Shape for '{base_name}': {name}")
                return candidate

        declared = scan_model_classes(module)
        if declared:
            logger.debug(f"Shape for '{base_name}' found by source scan: {declared[0]}")
            return getattr(module, declared[0])

        raise ShapeNotFoundError(base_name, attempted)

    def resolve_validator(self, base_name: str, module: ModuleType) -> Any:
        attempted = validator_candidates(base_name)
        for name in attempted:
            constructor = getattr(module, name, None)
            if not callable(constructor):
                continue
            try:
                validator = constructor()
            except Exception as e:
                raise DiscoveryError(base_name, f"{name}() failed: {e}") from e
            logger.debug(f"Validator for '{base_name}': {name}")
            return validator

        raise ValidatorNotFoundError(base_name, attempted)

    # -------------------------------------------------------------------------
    # Module enumeration
    # -------------------------------------------------------------------------

    @staticmethod
    def list_module_names(package_name: str) -> set[str]:
        """
        Names of the candidate modules in a package.

        Raises:
            ImportError: If the package can't be imported
        """
        package = importlib.import_module(package_name)
        search_path = getattr(package, "__path__", None)
        if search_path is None:
            raise ImportError(f"{package_name} is not a package")

        names = set()
        for module_info in pkgutil.iter_modules(search_path):
            name = module_info.name
            if module_info.ispkg or name.startswith("_") or name in IGNORED_MODULES:
                continue
            if name.startswith("test_") or name.endswith("_test"):
                continue
            names.add(name)
        return names

    @staticmethod
    def _import(package_name: str, base_name: str) -> ModuleType:
        module_path = f"{package_name}.{base_name}"
        try:
            return importlib.import_module(module_path)
        except Exception as e:
            raise DiscoveryError(base_name, f"cannot import {module_path}: {e}") from e


def discover_and_register_all(
    store: ModelStore,
    models_package: str | None = None,
    validations_package: str | None = None,
) -> DiscoveryReport:
    """Run discovery against the configured packages (see app.config)."""
    from app.config import settings

    engine = DiscoveryEngine(
        store,
        models_package=models_package or settings.MODELS_PACKAGE,
        validations_package=validations_package or settings.VALIDATIONS_PACKAGE,
    )
    return engine.discover_and_register_all()
