from specconsole.core.models import Tally, bucket_for
from specconsole.core.state import StateStore


def test_suite_depth_returns_after_balanced_events() -> None:
    store = StateStore()
    store.on_run_start("0-0", ["a.js"])
    store.on_suite_start("0-0", "outer")
    before = store.session("0-0").depth
    store.on_suite_start("0-0", "inner", "outer")
    store.on_suite_start("0-0", "deepest", "inner")
    store.on_suite_end("0-0")
    store.on_suite_end("0-0")
    assert store.session("0-0").depth == before
    store.on_suite_end("0-0")
    assert store.session("0-0").depth == 0


def test_suite_depth_is_parent_plus_one() -> None:
    store = StateStore()
    store.on_run_start("1", [])
    assert store.on_suite_start("1", "root") == 1
    assert store.on_suite_start("1", "child", "root") == 2
    store.on_suite_end("1")
    assert store.on_suite_start("1", "sibling", "root") == 2
    assert store.depth("1", "child") == 2


def test_suite_end_never_goes_negative() -> None:
    store = StateStore()
    store.on_run_start("1", [])
    assert store.on_suite_end("1") == 0
    assert store.session("1").depth == 0


def test_indent_renders_depth_zero_and_one_flush_left() -> None:
    store = StateStore()
    store.on_run_start("1", [])
    store.on_suite_start("1", "a")
    store.on_suite_start("1", "b", "a")
    store.on_suite_start("1", "c", "b")
    assert store.indent("1", "missing") == ""
    assert store.indent("1", "a") == ""
    assert store.indent("1", "b") == "    "
    assert store.indent("1", "c") == "        "


def test_sessions_keep_separate_depths() -> None:
    store = StateStore()
    store.on_run_start("a", [])
    store.on_run_start("b", [])
    store.on_suite_start("a", "s1")
    store.on_suite_start("a", "s2")
    store.on_suite_start("b", "t1")
    assert store.session("a").depth == 2
    assert store.session("b").depth == 1


def test_each_test_state_counts_once_including_retries() -> None:
    store = StateStore()
    store.on_run_start("1", [])
    states = ["pass", "fail", "pass", "pending", "broken", "unverified", "weird"]
    for state in states:
        store.on_test_state("1", state)
    tally = store.tally("1")
    assert tally.total == len(states)
    assert (tally.passing, tally.pending, tally.failing, tally.broken, tally.unresolved) == (2, 1, 1, 1, 2)


def test_run_start_resets_tally_and_indents() -> None:
    store = StateStore()
    store.on_run_start("1", ["x.js"])
    store.on_suite_start("1", "s")
    store.on_test_state("1", "pass")
    session = store.on_run_start("1", ["y.js"])
    assert session.tally.total == 0
    assert session.depth == 0
    assert session.suite_depths == {}
    assert session.specs == ("y.js",)


def test_start_specs_switches_phase_once() -> None:
    store = StateStore()
    store.on_run_start("1", [])
    store.failures.next()
    assert store.phase_tag == "[TESTCASE] "
    assert store.start_specs("1") is True
    assert store.failures.value == 0
    assert store.phase_tag == "[SPEC] "
    store.failures.next()
    assert store.start_specs("1") is False
    assert store.failures.value == 1


def test_step_indent_width() -> None:
    store = StateStore()
    store.session("1").step_depth = 2
    assert store.step_indent("1") == "    "
    assert store.step_indent("1", inline=1) == "     "


def test_bucket_for_and_tally_order() -> None:
    assert bucket_for("pass") == "passing"
    assert bucket_for("unvalidated") == "unresolved"
    assert bucket_for(None) == "unresolved"
    tally = Tally(passing=1, broken=2)
    assert [name for name, _ in tally.items()] == ["passing", "pending", "failing", "broken", "unresolved"]
    tally.increment("nonsense")
    assert tally.unresolved == 1
