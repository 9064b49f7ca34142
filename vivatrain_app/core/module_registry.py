"""Declarative blueprint registration.

The pages blueprint is mounted at the root; every JSON API blueprint is
mounted under ``/api/v1/<resource>`` and exempted from CSRF checks, since
those endpoints are called by the client controllers with the session
cookie rather than from a rendered form.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from flask import Blueprint, Flask
from werkzeug.utils import import_string

API_V1_PREFIX = "/api/v1"


@dataclass(frozen=True)
class ModuleDefinition:
    """One blueprint and where it is mounted."""

    import_path: str
    attribute: str
    url_prefix: Optional[str] = None
    csrf_exempt: bool = False

    @property
    def name(self) -> str:
        return f"{self.import_path}:{self.attribute}"

    def load_blueprint(self) -> Blueprint:
        blueprint = getattr(import_string(self.import_path), self.attribute, None)
        if not isinstance(blueprint, Blueprint):
            raise TypeError(f"{self.name} is not a Flask Blueprint (got {type(blueprint).__name__})")
        return blueprint


def api_module(package: str, attribute: str, resource: str) -> ModuleDefinition:
    """A JSON API blueprint from ``vivatrain_app.modules.<package>``."""

    return ModuleDefinition(
        f"vivatrain_app.modules.{package}",
        attribute,
        url_prefix=f"{API_V1_PREFIX}/{resource}",
        csrf_exempt=True,
    )


def register_modules(app: Flask, modules: Sequence[ModuleDefinition]) -> List[str]:
    """Register ``modules`` in order; returns the registered blueprint names."""

    from .extensions import csrf_protect

    registered = []
    for module in modules:
        blueprint = module.load_blueprint()
        if module.csrf_exempt:
            csrf_protect.exempt(blueprint)
        app.register_blueprint(blueprint, url_prefix=module.url_prefix)
        registered.append(blueprint.name)
        app.logger.debug(
            "Registered %s at %s%s",
            module.name,
            module.url_prefix or "/",
            " (CSRF exempt)" if module.csrf_exempt else "",
        )
    return registered


DEFAULT_MODULES: Sequence[ModuleDefinition] = (
    ModuleDefinition("vivatrain_app.modules.views", "views_bp"),
    api_module("auth", "auth_api_bp", "users"),
    api_module("sentences", "sentences_api_bp", "sentences"),
    api_module("tasks", "tasks_api_bp", "tasks"),
    api_module("results", "student_tasks_api_bp", "studenttasks"),
    api_module("results", "revision_api_bp", "revision"),
    api_module("audio", "audio_api_bp", "audio"),
)


def register_default_modules(app: Flask) -> List[str]:
    return register_modules(app, DEFAULT_MODULES)
