"""Extract artifact references from message payloads.

A Jinja2 template turns the JSON payload into a JSON list of artifact
objects. The payload's top-level keys are available to the template as
variables and the full document as `payload`. Without a template no
artifacts are extracted.

Example template::

    [
      {"type": "docker/image",
       "reference": "{{ image }}:{{ tag }}",
       "name": "{{ image }}"}
    ]
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from jinja2 import Environment, StrictUndefined, Template, TemplateError

from echo_pubsub.app.domain.models import Artifact


class ArtifactExtractionError(Exception):
    """Raised when a payload cannot be turned into artifacts."""


class MessageArtifactTranslator:
    """Maps a raw payload string to a set of artifacts. Safe to share across threads."""

    def __init__(self, template_path: str | None = None) -> None:
        self._template: Template | None = None
        if template_path:
            self._template = self._load_template(template_path)

    @staticmethod
    def _load_template(template_path: str) -> Template:
        try:
            source = Path(template_path).read_text(encoding="utf-8")
        except OSError as exc:
            raise ArtifactExtractionError(f"cannot read artifact template {template_path}: {exc}") from exc
        env = Environment(undefined=StrictUndefined, autoescape=False)
        try:
            return env.from_string(source)
        except TemplateError as exc:
            raise ArtifactExtractionError(f"invalid artifact template {template_path}: {exc}") from exc

    def parse_artifacts(self, message_payload: str) -> frozenset[Artifact]:
        if self._template is None or not message_payload or not message_payload.strip():
            return frozenset()

        context = self._read_context(message_payload)
        try:
            rendered = self._template.render(context)
        except TemplateError as exc:
            raise ArtifactExtractionError(f"artifact template failed to render: {exc}") from exc
        return self._read_artifacts(rendered)

    @staticmethod
    def _read_context(message_payload: str) -> dict[str, Any]:
        try:
            document = json.loads(message_payload)
        except json.JSONDecodeError as exc:
            raise ArtifactExtractionError(f"payload is not valid JSON: {exc}") from exc
        context: dict[str, Any] = {}
        if isinstance(document, dict):
            context.update({k: v for k, v in document.items() if isinstance(k, str) and k.isidentifier()})
        context["payload"] = document
        return context

    @staticmethod
    def _read_artifacts(rendered: str) -> frozenset[Artifact]:
        try:
            items = json.loads(rendered)
        except json.JSONDecodeError as exc:
            raise ArtifactExtractionError(f"template output is not valid JSON: {exc}") from exc
        if not isinstance(items, list):
            raise ArtifactExtractionError("template output must be a JSON list of artifacts")
        try:
            return frozenset(Artifact.from_dict(item) for item in items)
        except TypeError as exc:
            raise ArtifactExtractionError(str(exc)) from exc
