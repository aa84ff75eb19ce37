"""
tests/test_compiler.py
Tests for the compilation pipeline (SchemaCompiler) and output rendering.
"""

from __future__ import annotations

import json
import pathlib

import pytest
import yaml

from jdlschema.compiler import (
    CompilationReport,
    SchemaCompiler,
    build_output_document,
    render_document,
)
from jdlschema.models import GeneratorConfig, ParsedSchema
from jdlschema.utils import read_file


# ===========================================================================
# Output document
# ===========================================================================


class TestOutputDocument:
    def test_document_shape(self, blog_schema: ParsedSchema) -> None:
        config = GeneratorConfig(
            plural_overrides={"Blog": "weblogs"},
            relationship_payload_mode="fullObject",
        )
        doc = build_output_document(blog_schema, config)
        assert list(doc) == ["entities", "enums", "resources", "options"]
        assert doc["resources"] == {
            "Blog": "/weblogs",
            "Post": "/posts",
            "Tag": "/tags",
        }
        assert doc["options"] == {
            "pluralOverrides": {"Blog": "weblogs"},
            "relationshipPayloadMode": "fullObject",
        }
        assert doc["enums"] == {"Status": ["DRAFT", "PUBLISHED"]}

    def test_relationship_fields_annotated(self, blog_schema: ParsedSchema) -> None:
        doc = build_output_document(blog_schema, GeneratorConfig())
        blog_fields = {f["name"]: f for f in doc["entities"]["Blog"]}
        post_fields = {f["name"]: f for f in doc["entities"]["Post"]}

        assert blog_fields["posts"]["relKind"] == "O2M"
        assert blog_fields["posts"]["isCollection"] is True
        assert blog_fields["posts"]["inverse"] == {"entity": "Post", "fieldName": "blog"}
        assert post_fields["blog"]["relKind"] == "M2O"
        assert post_fields["blog"]["isCollection"] is False
        assert post_fields["blog"]["inverse"] == {"entity": "Blog", "fieldName": "posts"}
        assert post_fields["tags"]["inverse"] == {"entity": "Tag", "fieldName": "posts"}

    def test_plain_fields_match_schema(self, blog_schema: ParsedSchema) -> None:
        doc = build_output_document(blog_schema, GeneratorConfig())
        assert doc["entities"]["Blog"][1] == {
            "name": "name",
            "type": "String",
            "required": True,
            "nullable": False,
            "isRelationship": False,
        }
        for fields in doc["entities"].values():
            for f in fields:
                if not f["isRelationship"]:
                    assert "relKind" not in f and "inverse" not in f

    def test_schema_to_dict_untouched(self, blog_schema: ParsedSchema) -> None:
        build_output_document(blog_schema, GeneratorConfig())
        blog_fields = blog_schema.to_dict()["entities"]["Blog"]
        posts = next(f for f in blog_fields if f["name"] == "posts")
        assert "relKind" not in posts

    def test_render_json(self, blog_schema: ParsedSchema) -> None:
        doc = build_output_document(blog_schema, GeneratorConfig())
        text = render_document(doc, "json", 2)
        assert text.endswith("\n")
        assert json.loads(text) == doc

    def test_render_compact_json(self) -> None:
        assert render_document({"a": [1, 2]}, "json", 0) == '{"a": [1, 2]}\n'

    def test_render_yaml_keeps_key_order(self, blog_schema: ParsedSchema) -> None:
        doc = build_output_document(blog_schema, GeneratorConfig())
        text = render_document(doc, "yaml")
        assert text.startswith("entities:")
        assert yaml.safe_load(text) == doc

    def test_unknown_format(self) -> None:
        with pytest.raises(ValueError):
            render_document({}, "xml")


# ===========================================================================
# Pipeline
# ===========================================================================


class TestCompileText:
    def test_success(self, blog_jdl: str) -> None:
        report = SchemaCompiler().compile_text(blog_jdl, GeneratorConfig())
        assert report.success
        assert report.total_entities == 3
        assert report.total_enums == 1
        assert report.total_relationship_fields == 4
        assert report.rendered is not None
        assert json.loads(report.rendered)["resources"]["Tag"] == "/tags"
        assert [m.step_name for m in report.step_metrics] == [
            "Parse JDL",
            "Validate Schema",
            "Render Document",
        ]

    def test_parse_warnings_collected(self, blog_jdl: str) -> None:
        report = SchemaCompiler().compile_text(blog_jdl)
        assert report.success
        assert len(report.parse_warnings) == 1
        assert "UNKNOWN_RELATIONSHIP_ENTITY" in report.parse_warnings[0]

    def test_validation_errors_stop_pipeline(self) -> None:
        jdl = "entity A {\n  name String\n  name Integer\n}"
        report = SchemaCompiler().compile_text(jdl)
        assert not report.success
        assert report.rendered is None
        assert any("DUPLICATE_FIELD_NAME" in e for e in report.validation_errors)

    def test_errors_tolerated_when_not_failing(self) -> None:
        jdl = "entity A {\n  name String\n  name Integer\n}"
        report = SchemaCompiler(fail_on_errors=False).compile_text(jdl)
        assert report.success
        assert report.rendered is not None
        assert report.validation_errors

    def test_summary_text(self, blog_jdl: str) -> None:
        report = SchemaCompiler().compile_text(blog_jdl)
        summary = report.summary()
        assert "Compilation Report" in summary
        assert "SUCCESS" in summary
        assert "Parse Warnings (1)" in summary

    def test_empty_report_summary(self) -> None:
        assert "FAILED" in CompilationReport().summary()


class TestCompileFile:
    def test_compile_file(self, blog_jdl_path: pathlib.Path) -> None:
        report = SchemaCompiler().compile_file(blog_jdl_path)
        assert report.success
        assert report.jdl_file == str(blog_jdl_path)
        assert report.step_metrics[0].step_name == "Load JDL File"

    def test_missing_file_recorded(self, tmp_path: pathlib.Path) -> None:
        report = SchemaCompiler().compile_file(tmp_path / "missing.jdl")
        assert not report.success
        assert report.compilation_errors
        assert report.schema is None

    def test_undecodable_file_recorded(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "latin1.jdl"
        path.write_bytes(b"entity Caf\xe9 {}")
        report = SchemaCompiler().compile_file(path)
        assert not report.success
        assert "Cannot read" in report.compilation_errors[0]


class TestEmit:
    def test_writes_then_skips_unchanged(
        self, blog_jdl: str, tmp_path: pathlib.Path
    ) -> None:
        target = tmp_path / "out" / "schema.json"
        config = GeneratorConfig(output_file=str(target))
        compiler = SchemaCompiler()

        first = compiler.compile_text(blog_jdl, config)
        assert compiler.emit(first, config) is True
        assert first.written and not first.skipped
        assert read_file(target) == first.rendered

        second = compiler.compile_text(blog_jdl, config)
        assert compiler.emit(second, config) is False
        assert second.skipped and not second.written

    def test_force_rewrites(self, blog_jdl: str, tmp_path: pathlib.Path) -> None:
        target = tmp_path / "schema.yaml"
        config = GeneratorConfig(output_file=str(target), output_format="yaml", force=True)
        compiler = SchemaCompiler()
        compiler.emit(compiler.compile_text(blog_jdl, config), config)
        report = compiler.compile_text(blog_jdl, config)
        assert compiler.emit(report, config) is True
        assert yaml.safe_load(read_file(target))["resources"]["Blog"] == "/blogs"

    def test_no_output_file_is_no_op(self, blog_jdl: str) -> None:
        compiler = SchemaCompiler()
        report = compiler.compile_text(blog_jdl)
        assert compiler.emit(report) is False
        assert not report.written and not report.skipped

    def test_nothing_rendered_is_no_op(self, tmp_path: pathlib.Path) -> None:
        config = GeneratorConfig(output_file=str(tmp_path / "x.json"))
        report = CompilationReport()
        assert SchemaCompiler().emit(report, config) is False
        assert not (tmp_path / "x.json").exists()
