"""Shared pytest fixtures and test helpers for stowr tests."""

from __future__ import annotations

import sys
import uuid
from collections.abc import Callable, Iterator
from pathlib import Path
from types import ModuleType

import pytest
from click.testing import CliRunner

from stowr.generator.pipeline import generate_source, load_generated

FOO_SOURCE = '''\
from stowr import command, domain, domain_impl


@domain
class Foo:
    """A named thing."""

    name: str


@domain_impl(Foo)
class FooBehaviour:
    @command
    def rename(self, new_name: str) -> None:
        self.name = new_name
'''

ACCOUNT_SOURCE = '''\
from decimal import Decimal

from stowr import AggregateError, command, domain, domain_impl


@domain
class Account:
    owner: str
    balance: Decimal
    tags: list[str]


@domain_impl(Account)
class AccountBehaviour:
    """Account transitions."""

    @command
    def deposit(self, amount: Decimal) -> None:
        self.balance += amount

    @command
    def withdraw(self, amount: Decimal, *, memo: str) -> None:
        if amount > self.balance:
            raise AggregateError(f"insufficient funds for {memo}")
        self.balance -= amount

    @command
    def add_tag(self, tag: str) -> None:
        self.tags.append(tag)

    def is_empty(self) -> bool:
        return self.balance == 0


@domain
class Ledger:
    title: str
'''


@pytest.fixture(autouse=True)
def _no_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's STOWR_CONFIG from leaking into tests."""
    monkeypatch.delenv("STOWR_CONFIG", raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def _isolated_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp directory so config discovery stays inside it.

    Use via ``@pytest.mark.usefixtures("_isolated_project")``.
    """
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def load_module() -> Iterator[Callable[[str], ModuleType]]:
    """Execute generated source as a throwaway module."""
    loaded: list[str] = []

    def _load(code: str) -> ModuleType:
        name = f"stowr_generated_{uuid.uuid4().hex}"
        loaded.append(name)
        return load_generated(name, code)

    yield _load
    for name in loaded:
        sys.modules.pop(name, None)


@pytest.fixture
def foo_module(load_module: Callable[[str], ModuleType]) -> ModuleType:
    """Generated module for the single-field ``Foo`` aggregate."""
    return load_module(generate_source(FOO_SOURCE, filename="foo.py"))


@pytest.fixture
def account_module(load_module: Callable[[str], ModuleType]) -> ModuleType:
    """Generated module for ``Account`` (aggregate) and ``Ledger`` (plain entity)."""
    return load_module(generate_source(ACCOUNT_SOURCE, filename="account.py"))


def write_source(directory: Path, text: str = FOO_SOURCE, name: str = "domain.py") -> Path:
    """Write a declaration file and return its path."""
    path = directory / name
    path.write_text(text, encoding="utf-8")
    return path
