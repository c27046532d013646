"""Unit tests for template-driven artifact extraction."""
from __future__ import annotations

import json

import pytest

from echo_pubsub.app.domain.artifact_translator import ArtifactExtractionError, MessageArtifactTranslator
from echo_pubsub.app.domain.models import Artifact

GCS_TEMPLATE = """[
  {% if name %}
  {"type": "gcs/object",
   "name": "gs://{{ bucket }}/{{ name }}",
   "reference": "gs://{{ bucket }}/{{ name }}",
   "artifactAccount": "gcs-account",
   "metadata": {"generation": "{{ generation }}"}}
  {% endif %}
]"""


@pytest.fixture()
def gcs_template(tmp_path):
    path = tmp_path / "gcs.jinja"
    path.write_text(GCS_TEMPLATE, encoding="utf-8")
    return str(path)


def test_without_template_no_artifacts():
    translator = MessageArtifactTranslator()
    assert translator.parse_artifacts('{"bucket": "b", "name": "o"}') == frozenset()
    assert translator.parse_artifacts("not json at all") == frozenset()


def test_template_renders_artifacts(gcs_template):
    translator = MessageArtifactTranslator(gcs_template)
    payload = json.dumps({"bucket": "my-bucket", "name": "app.tar.gz", "generation": 7})

    artifacts = translator.parse_artifacts(payload)

    assert artifacts == frozenset(
        {
            Artifact(
                type="gcs/object",
                name="gs://my-bucket/app.tar.gz",
                reference="gs://my-bucket/app.tar.gz",
                artifact_account="gcs-account",
            )
        }
    )
    (artifact,) = artifacts
    assert artifact.metadata == {"generation": "7"}


def test_template_can_render_no_artifacts(gcs_template):
    translator = MessageArtifactTranslator(gcs_template)
    assert translator.parse_artifacts(json.dumps({"bucket": "b", "name": ""})) == frozenset()


def test_whole_payload_available_as_payload(tmp_path):
    path = tmp_path / "t.jinja"
    path.write_text('[{% for a in payload %}{"type": "x", "name": "{{ a }}"}{% if not loop.last %},{% endif %}{% endfor %}]')
    translator = MessageArtifactTranslator(str(path))

    artifacts = translator.parse_artifacts('["one", "two"]')

    assert {a.name for a in artifacts} == {"one", "two"}


def test_empty_payload_yields_no_artifacts(gcs_template):
    assert MessageArtifactTranslator(gcs_template).parse_artifacts("   ") == frozenset()


def test_non_json_payload_raises(gcs_template):
    with pytest.raises(ArtifactExtractionError, match="payload is not valid JSON"):
        MessageArtifactTranslator(gcs_template).parse_artifacts("<xml/>")


def test_missing_template_variable_raises(gcs_template):
    with pytest.raises(ArtifactExtractionError, match="failed to render"):
        MessageArtifactTranslator(gcs_template).parse_artifacts('{"name": "o"}')


def test_non_list_output_raises(tmp_path):
    path = tmp_path / "t.jinja"
    path.write_text('{"type": "x"}')
    with pytest.raises(ArtifactExtractionError, match="JSON list"):
        MessageArtifactTranslator(str(path)).parse_artifacts("{}")


def test_unreadable_template_fails_at_construction(tmp_path):
    with pytest.raises(ArtifactExtractionError, match="cannot read artifact template"):
        MessageArtifactTranslator(str(tmp_path / "missing.jinja"))


def test_invalid_template_syntax_fails_at_construction(tmp_path):
    path = tmp_path / "t.jinja"
    path.write_text("[{% for %}]")
    with pytest.raises(ArtifactExtractionError, match="invalid artifact template"):
        MessageArtifactTranslator(str(path))
