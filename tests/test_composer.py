from specconsole.core.models import Tally
from specconsole.reporting.titles import SEPARATOR

CID = "0-0"


def _login_run(manager, *, runner_extra=None, tests=None) -> None:
    runner = {"cid": CID, "specs": ["/specs/login.js"], "capabilities": {"browserName": "chrome"}}
    runner.update(runner_extra or {})
    manager.emit("runner:start", runner)
    manager.emit("suite:start", {"cid": CID, "uid": "s1", "title": "Login"})
    for event, payload in tests or [("test:pass", {"cid": CID, "title": "works"})]:
        manager.emit(event, payload)
    manager.emit("suite:end", {"cid": CID})
    manager.emit("runner:end", {"cid": CID, "duration": 1000})


def test_round_trip_block(make_reporter, capsys) -> None:
    manager, _ = make_reporter()
    _login_run(manager)
    out = capsys.readouterr().out
    assert out == (
        f"{SEPARATOR}\n"
        "[TESTCASE]  Testcase File: /specs/login.js\n"
        "[TESTCASE]  Running: chrome\n"
        "[TESTCASE] \n"
        "[TESTCASE]  Login\n"
        "[TESTCASE]    ✓ works\n"
        "[TESTCASE]\n"
        "[TESTCASE] \n"
        "[TESTCASE]  1 passing (1s)\n"
        f"{SEPARATOR}\n"
        "\n"
    )


def test_failing_test_block_lists_numbered_failure(make_reporter, capsys) -> None:
    manager, _ = make_reporter()
    _login_run(
        manager,
        tests=[
            ("test:pass", {"cid": CID, "title": "works"}),
            ("test:fail", {"cid": CID, "title": "breaks", "err": {"message": "A\nB"}}),
        ],
    )
    out = capsys.readouterr().out
    assert "[TESTCASE]    1) breaks\n" in out
    assert "[TESTCASE]  1 passing (1s)\n[TESTCASE]  1 failing\n" in out
    assert out.endswith(f"{SEPARATOR}\n\n1) Login breaks:\n\nA\nB\n\n\n")


def test_nested_suites_are_indented(make_reporter, capsys) -> None:
    manager, _ = make_reporter()
    manager.emit("runner:start", {"cid": CID, "specs": ["a.js"]})
    manager.emit("suite:start", {"cid": CID, "uid": "outer", "title": "Outer"})
    manager.emit("suite:start", {"cid": CID, "uid": "inner", "title": "Inner", "parentUid": "outer"})
    manager.emit("test:pending", {"cid": CID, "title": "later"})
    manager.emit("suite:end", {"cid": CID})
    manager.emit("suite:end", {"cid": CID})
    manager.emit("runner:end", {"cid": CID, "duration": 0})
    out = capsys.readouterr().out
    assert "[TESTCASE]  Outer\n[TESTCASE]\n" in out
    assert "[TESTCASE]" + " " * 6 + "Inner\n" + "[TESTCASE]" + " " * 8 + "- later\n" in out
    assert "[TESTCASE]  1 skipped (0s)\n" in out


def test_session_without_suites_prints_nothing(make_reporter, capsys) -> None:
    manager, reporter = make_reporter()
    manager.emit("runner:start", {"cid": CID, "specs": ["empty.js"]})
    assert reporter.composer.compose({"cid": CID}) == ""
    manager.emit("runner:end", {"cid": CID})
    assert capsys.readouterr().out == ""


def test_summary_attaches_duration_to_first_nonzero_line_only(make_reporter) -> None:
    _, reporter = make_reporter()
    tally = Tally(passing=0, pending=2, failing=1, broken=0, unresolved=3)
    text = reporter.composer.summary(tally, 65_000, "[SPEC] ")
    assert text == (
        "[SPEC]  2 skipped (1m, 5s)\n"
        "[SPEC]  1 failing\n"
        "[SPEC]  3 unverified\n"
    )
    assert text.count("(") == 1


def test_summary_uses_configured_labels(make_reporter) -> None:
    _, reporter = make_reporter(variant="classic", pendingLabel="pending")
    text = reporter.composer.summary(Tally(pending=1, unresolved=1), 0)
    assert text == " 1 pending (0s)\n 1 unvalidated\n"


def test_before_all_suite_hidden_but_unset_tests_counted_pending(make_reporter, capsys) -> None:
    manager, reporter = make_reporter()
    manager.emit("runner:start", {"cid": CID, "specs": ["a.js"]})
    manager.emit("suite:start", {"cid": CID, "uid": '"before all" hook', "title": '"before all" hook'})
    manager.emit("test:start", {"cid": CID, "title": "setup"})
    manager.emit("suite:end", {"cid": CID})
    manager.emit("suite:start", {"cid": CID, "uid": "s1", "title": "Visible"})
    manager.emit("test:start", {"cid": CID, "title": "never finished"})
    manager.emit("test:pass", {"cid": CID, "title": "done"})
    manager.emit("suite:end", {"cid": CID})
    manager.emit("runner:end", {"cid": CID, "duration": 2000})
    out = capsys.readouterr().out
    assert "before all" not in out
    assert "setup" not in out
    assert "[TESTCASE]    - never finished\n" in out
    assert "[TESTCASE]  1 passing (2s)\n[TESTCASE]  2 skipped\n" in out
    assert reporter.store.tally(CID).pending == 2
    assert manager.stats.counts.pending == 2


def test_session_id_and_sauce_job_link(make_reporter, capsys) -> None:
    manager, _ = make_reporter()
    _login_run(manager, runner_extra={"sessionID": "abc123", "config": {"host": "ondemand.saucelabs.com"}})
    out = capsys.readouterr().out
    assert "[TESTCASE]  Session ID: abc123\n" in out
    assert out.endswith("[TESTCASE]\n[TESTCASE]  Check out job at https://saucelabs.com/tests/abc123\n\n")


def test_job_link_skipped_for_other_hosts(make_reporter, capsys) -> None:
    manager, _ = make_reporter()
    _login_run(manager, runner_extra={"sessionID": "abc123", "config": {"host": "localhost"}})
    assert "Check out job" not in capsys.readouterr().out


def test_spec_phase_block_names_spec_file_without_descriptor(make_reporter, capsys) -> None:
    manager, _ = make_reporter()
    manager.emit("startSpecs", {"cid": CID})
    _login_run(manager)
    out = capsys.readouterr().out
    assert "[SPEC]  Spec File: /specs/login.js\n" in out
    assert "Running:" not in out
    assert "[SPEC]    ✓ works\n" in out


def test_same_test_title_in_two_suites_keeps_its_own_number(make_reporter, capsys) -> None:
    manager, _ = make_reporter()
    manager.emit("runner:start", {"cid": CID, "specs": ["shop.js"]})
    for uid, title, message in (("cart", "Cart", "m1"), ("checkout", "Checkout", "m2")):
        manager.emit("suite:start", {"cid": CID, "uid": uid, "title": title})
        manager.emit("test:fail", {"cid": CID, "title": "loads", "err": {"message": message}})
        manager.emit("suite:end", {"cid": CID})
    manager.emit("runner:end", {"cid": CID, "duration": 0})
    out = capsys.readouterr().out
    assert "[TESTCASE]  Cart\n[TESTCASE]    1) loads\n" in out
    assert "[TESTCASE]  Checkout\n[TESTCASE]    2) loads\n" in out
    assert "\n1) Cart loads:\n\nm1\n" in out
    assert "\n2) Checkout loads:\n\nm2\n" in out
    assert "3)" not in out


def test_header_omits_running_line_without_capabilities(make_reporter, capsys) -> None:
    manager, _ = make_reporter()
    manager.emit("runner:start", {"cid": CID, "specs": ["a.js"]})
    manager.emit("suite:start", {"cid": CID, "uid": "s", "title": "S"})
    manager.emit("test:pass", {"cid": CID, "title": "t"})
    manager.emit("suite:end", {"cid": CID})
    manager.emit("runner:end", {"cid": CID, "duration": 0})
    out = capsys.readouterr().out
    assert "Running:" not in out
    assert "[TESTCASE]  Testcase File: a.js\n[TESTCASE] \n[TESTCASE]  S\n" in out
