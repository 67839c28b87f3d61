"""Tests for formatting and rendering ServiceResults."""

from __future__ import annotations

import json

from stowr.output.formatters import OutputSettings, format_result
from stowr.output.renderers import render_quiet, render_result
from stowr.services.result import ServiceResult

GENERATE_RESULT = ServiceResult(
    ok=True,
    op="generate",
    data={
        "source": "/work/domain.py",
        "output": "/work/domain_gen.py",
        "entities": ["Account", "Ledger"],
        "aggregates": ["Account"],
        "up_to_date": False,
    },
)

INSPECT_RESULT = ServiceResult(
    ok=True,
    op="inspect",
    data={
        "source": "/work/domain.py",
        "entities": [
            {
                "name": "Foo",
                "tag": "FooTag",
                "id": "FooId",
                "repository": "FooRepository",
                "repo_alias": "FooRepo",
                "fields": [{"name": "name", "type": "str"}],
                "command_type": "FooCommand",
                "event_type": "FooEvent",
                "variants": [
                    {
                        "name": "Rename",
                        "method": "rename",
                        "fields": [{"name": "new_name", "type": "str"}],
                    }
                ],
            }
        ],
    },
)

FAILURE = ServiceResult.failure(
    "generate", "DUPLICATE_VARIANT", "Foo: commands 'set_name' and 'setName' clash", entity="Foo"
)


class TestRenderGenerate:
    def test_status_and_output(self) -> None:
        text = render_result(GENERATE_RESULT)
        assert text.splitlines()[0] == "OK  generate"
        assert "output: /work/domain_gen.py" in text
        assert "entities: Account (aggregate), Ledger" in text
        assert "unchanged" not in text

    def test_up_to_date(self) -> None:
        data = {**GENERATE_RESULT.data, "up_to_date": True}
        result = GENERATE_RESULT.model_copy(update={"data": data})
        assert "status: unchanged" in render_result(result)

    def test_verbose_shows_source(self) -> None:
        assert "source: /work/domain.py" in render_result(GENERATE_RESULT, verbose=True)
        assert "source:" not in render_result(GENERATE_RESULT)

    def test_check_uses_same_layout(self) -> None:
        result = GENERATE_RESULT.model_copy(update={"op": "check"})
        assert render_result(result).startswith("OK  check")


class TestRenderInspect:
    def test_lists_every_artifact(self) -> None:
        text = render_result(INSPECT_RESULT)
        for name in (
            "FooTag",
            "FooId",
            "FooCommand.Rename",
            "FooEvent.Rename",
            "FooRepository",
            "FooRepo",
        ):
            assert name in text

    def test_brackets_are_not_markup(self) -> None:
        assert "RepositoryId[FooTag]" in render_result(INSPECT_RESULT)

    def test_verbose_shows_methods(self) -> None:
        assert "<- rename" in render_result(INSPECT_RESULT, verbose=True)


class TestRenderError:
    def test_error_line(self) -> None:
        text = render_result(FAILURE)
        assert text.startswith("ERROR  generate [DUPLICATE_VARIANT] Foo: commands")

    def test_verbose_detail(self) -> None:
        text = render_result(FAILURE, verbose=True)
        assert "detail:" in text
        assert "entity: Foo" in text


class TestRenderGeneric:
    def test_unknown_op(self) -> None:
        result = ServiceResult(ok=True, op="other", data={"count": 2, "names": ["a"]})
        text = render_result(result)
        assert "OK  other" in text
        assert "count: 2" in text
        assert 'names: ["a"]' in text


class TestRenderQuiet:
    def test_success_prints_output_path(self) -> None:
        assert render_quiet(GENERATE_RESULT) == "/work/domain_gen.py"

    def test_success_without_output(self) -> None:
        assert render_quiet(INSPECT_RESULT) == "OK: inspect"

    def test_failure(self) -> None:
        assert render_quiet(FAILURE).startswith("ERROR: generate: Foo: commands")


class TestFormatResult:
    def test_json_mode(self) -> None:
        parsed = json.loads(format_result(FAILURE, settings=OutputSettings(json_output=True)))
        assert parsed["ok"] is False
        assert parsed["error"]["code"] == "DUPLICATE_VARIANT"
        assert parsed["error"]["detail"] == {"entity": "Foo"}

    def test_json_wins_over_quiet(self) -> None:
        settings = OutputSettings(json_output=True, quiet=True)
        assert json.loads(format_result(GENERATE_RESULT, settings=settings))["op"] == "generate"

    def test_quiet_mode(self) -> None:
        assert format_result(GENERATE_RESULT, settings=OutputSettings(quiet=True)) == (
            "/work/domain_gen.py"
        )

    def test_default_is_rich(self) -> None:
        assert format_result(GENERATE_RESULT).startswith("OK  generate")
