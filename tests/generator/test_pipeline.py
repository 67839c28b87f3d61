"""Tests for the all-or-nothing pipeline and the rendered module text."""

from __future__ import annotations

from pathlib import Path

import pytest

from stowr.generator.declarations import (
    DeclarationSet,
    ImplDeclaration,
    MethodDeclaration,
    RecordDeclaration,
)
from stowr.generator.errors import (
    DuplicateVariantError,
    NameCollisionError,
    UnknownEntityError,
    UnsupportedShapeError,
)
from stowr.generator.pipeline import generate, generate_file, generate_source, plan_module
from stowr.generator.parser import parse_declarations
from tests.conftest import ACCOUNT_SOURCE, FOO_SOURCE


class TestPlanModule:
    def test_entities_and_aggregates(self) -> None:
        plan = plan_module(parse_declarations(ACCOUNT_SOURCE))
        assert [e.name for e in plan.entities] == ["Account", "Ledger"]
        assert list(plan.aggregates) == ["Account"]

    def test_generated_names_unique(self) -> None:
        plan = plan_module(parse_declarations(ACCOUNT_SOURCE))
        assert len(plan.generated_names) == len(set(plan.generated_names))

    def test_entity_declared_twice(self) -> None:
        decls = DeclarationSet(
            records=(RecordDeclaration(name="Foo"), RecordDeclaration(name="Foo"))
        )
        with pytest.raises(NameCollisionError, match="declared twice"):
            plan_module(decls)

    def test_generated_names_collide(self) -> None:
        """``Foo`` generates the alias ``FooRepo``, so an entity ``FooRepo`` clashes."""
        decls = DeclarationSet(
            records=(RecordDeclaration(name="Foo"), RecordDeclaration(name="FooRepo"))
        )
        with pytest.raises(NameCollisionError) as exc_info:
            plan_module(decls)
        assert exc_info.value.detail["names"] == ["FooRepo"]

    def test_second_impl_block_rejected(self) -> None:
        source = FOO_SOURCE + "\n\n@domain_impl(Foo)\nclass More:\n    pass\n"
        with pytest.raises(NameCollisionError, match="more than one"):
            plan_module(parse_declarations(source))

    def test_impl_for_undeclared_entity(self) -> None:
        source = "@domain_impl(Ghost)\nclass GhostBehaviour:\n    pass\n"
        with pytest.raises(UnknownEntityError):
            plan_module(parse_declarations(source))

    def test_entity_shadows_runtime_import(self) -> None:
        with pytest.raises(NameCollisionError, match="shadow imports") as exc_info:
            plan_module(parse_declarations("@domain\nclass Repository:\n    x: int\n"))
        assert "Repository" in exc_info.value.detail["names"]

    def test_entity_shadows_user_import(self) -> None:
        source = "from decimal import Decimal\n\n@domain\nclass Decimal:\n    x: int\n"
        with pytest.raises(NameCollisionError) as exc_info:
            plan_module(parse_declarations(source))
        assert exc_info.value.detail["names"] == ["Decimal"]

    def test_definition_shadows_runtime_import(self) -> None:
        with pytest.raises(NameCollisionError) as exc_info:
            plan_module(parse_declarations("Tag = str\n\n" + FOO_SOURCE))
        assert exc_info.value.detail["names"] == ["Tag"]

    def test_definition_collides_with_generated_name(self) -> None:
        with pytest.raises(NameCollisionError, match="collide") as exc_info:
            plan_module(parse_declarations(FOO_SOURCE + "\n\nFooId = int\n"))
        assert exc_info.value.detail["names"] == ["FooId"]


class TestGenerate:
    def test_deterministic(self) -> None:
        assert generate_source(FOO_SOURCE) == generate_source(FOO_SOURCE)

    def test_header_names_source(self) -> None:
        code = generate_source(FOO_SOURCE, filename="foo.py")
        assert code.startswith("# Generated by stowr from foo.py. Do not edit by hand.\n")

    def test_header_can_be_disabled(self) -> None:
        code = generate_source(FOO_SOURCE, filename="foo.py", header=False)
        assert code.startswith('"""Domain types generated from foo.py."""')

    def test_all_artifacts_present(self) -> None:
        code = generate_source(FOO_SOURCE)
        for line in (
            "class FooTag(Tag):",
            "class FooId(RepositoryId[FooTag]):",
            "class FooCommand(SumType):",
            "    class Rename(Command):",
            "class FooEvent(SumType):",
            "    class Rename(Event):",
            "class Foo(Aggregate):",
            "    def new(cls, id: FooId, name: str) -> Foo:",
            "    def handle_command(self, command: Command) -> list[Event]:",
            "    def apply_event(self, event: Event) -> None:",
            "class FooRepository(Repository[Foo, FooId]):",
            "FooRepo: TypeAlias = FooRepository",
        ):
            assert line in code

    def test_plain_entity_has_no_dispatch(self) -> None:
        code = generate_source("@domain\nclass Ledger:\n    title: str\n")
        assert "class Ledger(Entity):" in code
        assert "LedgerCommand" not in code
        assert "handle_command" not in code

    def test_user_imports_carried(self) -> None:
        code = generate_source(ACCOUNT_SOURCE)
        assert "from decimal import Decimal\n" in code
        assert "from stowr import AggregateError\n" in code
        assert "import command" not in code

    def test_no_trailing_whitespace_or_blank_runs(self) -> None:
        code = generate_source(ACCOUNT_SOURCE)
        assert all(line == line.rstrip() for line in code.splitlines())
        assert "\n\n\n\n" not in code
        assert code.endswith("\n") and not code.endswith("\n\n")

    def test_valid_python(self) -> None:
        compile(generate_source(ACCOUNT_SOURCE), "<generated>", "exec")

    def test_failure_produces_nothing(self) -> None:
        source = FOO_SOURCE.replace(
            "        self.name = new_name\n",
            "        self.name = new_name\n\n    @command\n    def Rename(self) -> None:\n        pass\n",
        )
        with pytest.raises(DuplicateVariantError):
            generate_source(source)

    def test_generate_from_declaration_set(self) -> None:
        assert generate(parse_declarations(FOO_SOURCE)) == generate_source(FOO_SOURCE)

    def test_method_must_render_inside_its_class(self) -> None:
        decls = DeclarationSet(
            records=(RecordDeclaration(name="Foo"),),
            impls=(
                ImplDeclaration(
                    owner="Foo",
                    methods=(
                        MethodDeclaration(name="reset", source="def other(self) -> None:\n    pass"),
                    ),
                ),
            ),
        )
        with pytest.raises(UnsupportedShapeError, match="'reset' did not render"):
            generate(decls)

    def test_carried_definitions_rendered(self) -> None:
        code = generate_source("LIMIT = 10\n\n" + FOO_SOURCE)
        assert "\n\n\nLIMIT = 10\n\n\n" in code

    def test_generate_file(self, tmp_path: Path) -> None:
        path = tmp_path / "foo.py"
        path.write_text(FOO_SOURCE)
        assert generate_file(path) == generate_source(FOO_SOURCE, filename=str(path))

    def test_template_override(self, tmp_path: Path) -> None:
        override = tmp_path / "module"
        override.mkdir()
        (override / "module.py.j2").write_text("# {{ units | length }} entities\n")
        assert generate_source(ACCOUNT_SOURCE, template_dir=tmp_path) == "# 2 entities\n"
