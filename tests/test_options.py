# tests/test_options.py

from __future__ import annotations

from typing import Annotated, Any, Dict, Optional

import pytest

from taskset.core.exceptions import (
    MissingOptionsError,
    OptionMissingValueError,
    OptionValueError,
    TaskOptionError,
    UnknownOptionsError,
)
from taskset.core.options import OptionSet
from taskset.core.parameter import Option


@pytest.fixture()
def seen() -> Dict[str, Any]:
    return {}


def test_option_set_returns_unmatched_tokens_in_order() -> None:
    got = []
    options = OptionSet("build")
    options.add_value("target", "Build target", str, got.append)

    rest = options.parse(["--x", "--target=linux", "--y", "z"])

    assert got == ["linux"]
    assert rest == ["--x", "--y", "z"]


def test_option_set_rejects_duplicate_names() -> None:
    options = OptionSet("build")
    options.add_value("target", None, str, print)

    with pytest.raises(TaskOptionError):
        options.add_flag("target", None, print)


def test_missing_required_options_are_grouped(task_set, seen) -> None:
    def test(a: str, foo: int) -> None:
        seen["test"] = (a, foo)

    def test2(a: str) -> None:
        seen["test2"] = a

    task_set.create("Test").depends_on("Test2").run(test)
    task_set.create("Test2").run(test2)

    with pytest.raises(MissingOptionsError) as info:
        task_set.invoke_advanced("Test")

    assert info.value.options == ["-a", "--foo"]
    assert info.value.groups == {"-a": ["Test2", "Test"], "--foo": ["Test"]}
    assert '"-a" (required by "Test2", "Test")' in str(info.value)
    assert seen == {}


def test_unknown_options_are_reported_in_order(task_set, seen) -> None:
    def test(a: str) -> None:
        seen["a"] = a

    task_set.create("Test").run(test)

    with pytest.raises(UnknownOptionsError) as info:
        task_set.invoke_advanced("Test", "--foo", "-a", "value", "--bar")

    assert info.value.options == ["--foo", "--bar"]
    assert seen == {}


def test_option_known_to_any_task_is_not_unknown(task_set, seen) -> None:
    def first(a: str) -> None:
        seen["first"] = a

    def second(count: int) -> None:
        seen["second"] = count

    task_set.create("first").run(first)
    task_set.create("second").depends_on("first").run(second)

    task_set.invoke_advanced("second", "-a", "x", "--count", "3")

    assert seen == {"first": "x", "second": 3}


def test_repeated_value_text_consumed_by_different_tasks(task_set, seen) -> None:
    def build(workers: int) -> None:
        seen["build"] = workers

    def deploy(retries: int) -> None:
        seen["deploy"] = retries

    task_set.create("build").run(build)
    task_set.create("deploy").run(deploy)

    task_set.invoke_advanced("build", "deploy", "--workers", "3", "--retries", "3")

    assert seen == {"build": 3, "deploy": 3}


def test_repeated_unknown_token_is_reported_once(task_set, seen) -> None:
    def build(workers: int) -> None:
        seen["build"] = workers

    task_set.create("build").run(build)

    with pytest.raises(UnknownOptionsError) as info:
        task_set.invoke_advanced("build", "--workers", "3", "--extra", "3", "--extra")

    assert info.value.options == ["--extra", "3"]
    assert seen == {}


def test_option_set_reports_unmatched_positions() -> None:
    options = OptionSet("build")
    options.add_value("workers", None, int, lambda value: None)

    assert options.parse_positions(["--workers", "3", "--retries", "3"]) == [2, 3]


def test_shared_option_binds_every_task(task_set, seen) -> None:
    def compile_(mode: str) -> None:
        seen["compile"] = mode

    def link(mode: str) -> None:
        seen["link"] = mode

    task_set.create("compile").run(compile_)
    task_set.create("link").depends_on("compile").run(link)

    task_set.invoke_advanced("link", "--mode=release")

    assert seen == {"compile": "release", "link": "release"}


@pytest.mark.parametrize(
    "args, expected",
    [
        ([], False),
        (["-b"], True),
        (["-b+"], True),
        (["-b-"], False),
    ],
)
def test_flag_forms(task_set, seen, args, expected) -> None:
    def test(b: bool) -> None:
        seen["b"] = b

    task_set.create("Test").run(test)
    task_set.invoke_advanced("Test", *args)

    assert seen["b"] is expected


def test_nullable_flag_stays_none_when_absent(task_set, seen) -> None:
    def test(b: Optional[bool]) -> None:
        seen["b"] = b

    task_set.create("Test").run(test)
    task_set.invoke_advanced("Test")

    assert seen["b"] is None


def test_hyphenated_flag(task_set, seen) -> None:
    def deploy(dry_run: bool) -> None:
        seen["dry_run"] = dry_run

    task_set.create("deploy").run(deploy)
    task_set.invoke_advanced("deploy", "--dry-run")

    assert seen["dry_run"] is True


@pytest.mark.parametrize(
    "args",
    [
        ["--name", "value"],
        ["--name=value"],
    ],
)
def test_value_forms(task_set, seen, args) -> None:
    def test(name: str) -> None:
        seen["name"] = name

    task_set.create("Test").run(test)
    task_set.invoke_advanced("Test", *args)

    assert seen["name"] == "value"


def test_short_value_with_equals(task_set, seen) -> None:
    def test(s: str) -> None:
        seen["s"] = s

    task_set.create("Test").run(test)
    task_set.invoke_advanced("Test", "-s=value")

    assert seen["s"] == "value"


def test_short_value_attached(task_set, seen) -> None:
    def test(s: str) -> None:
        seen["s"] = s

    task_set.create("Test").run(test)
    task_set.invoke_advanced("Test", "-svalue")

    assert seen["s"] == "value"


def test_missing_value(task_set, seen) -> None:
    def test(s: str) -> None:
        seen["s"] = s

    task_set.create("Test").run(test)

    with pytest.raises(OptionMissingValueError) as info:
        task_set.invoke_advanced("Test", "-s")

    assert info.value.task_name == "Test"
    assert info.value.option_name == "-s"
    assert "Missing required value for option '-s'." in str(info.value)
    assert seen == {}


def test_conversion_failure(task_set, seen) -> None:
    def test(i: int) -> None:
        seen["i"] = i

    task_set.create("Test").run(test)

    with pytest.raises(OptionValueError) as info:
        task_set.invoke_advanced("Test", "-i", "foo")

    assert info.value.option_name == "-i"
    assert info.value.value == "foo"
    assert "Could not convert string `foo' for option `-i'" in str(info.value)
    assert seen == {}


def test_values_are_converted_to_declared_type(task_set, seen) -> None:
    def test(i: int, ratio: float) -> None:
        seen["values"] = (i, ratio)

    task_set.create("Test").run(test)
    task_set.invoke_advanced("Test", "-i", "42", "--ratio", "0.25")

    assert seen["values"] == (42, 0.25)


def test_nullable_value_defaults_to_none(task_set, seen) -> None:
    def test(i: Optional[int]) -> None:
        seen["i"] = i

    task_set.create("Test").run(test)
    task_set.invoke_advanced("Test")

    assert seen["i"] is None


def test_declared_default_is_used(task_set, seen) -> None:
    def test(s: str = "foo", n: int = 3) -> None:
        seen["values"] = (s, n)

    task_set.create("Test").run(test)
    task_set.invoke_advanced("Test")

    assert seen["values"] == ("foo", 3)


def test_marked_parameters_are_optional(task_set, seen) -> None:
    def test(foo_opt: int, bar_opt: str) -> None:
        seen["values"] = (foo_opt, bar_opt)

    task_set.create("Test").run(test)
    task_set.invoke_advanced("Test", "--foo", "5")

    assert seen["values"] == (5, None)


def test_annotated_option_overrides_name(task_set, seen) -> None:
    def test(environment: Annotated[str, Option("e", "Target environment")]) -> None:
        seen["environment"] = environment

    task_set.create("Test").run(test)
    task_set.invoke_advanced("Test", "-e", "prod")

    assert seen["environment"] == "prod"


def test_options_may_precede_other_options_values(task_set, seen) -> None:
    def test(a: str, b: bool, count: int) -> None:
        seen["values"] = (a, b, count)

    task_set.create("Test").run(test)
    task_set.invoke_advanced("Test", "-b", "--count", "2", "-a", "x")

    assert seen["values"] == ("x", True, 2)


def test_missing_option_uses_hyphenated_name(task_set) -> None:
    def deploy(target_env: str) -> None:
        pass

    task_set.create("deploy").run(deploy)

    with pytest.raises(MissingOptionsError) as info:
        task_set.invoke_advanced("deploy")

    assert info.value.options == ["--target-env"]
