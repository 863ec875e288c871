import structlog

from rotation_calendar.logging import bind_run_context, get_logger


def test_importing_configures_structlog():
    assert structlog.is_configured()


def test_info_is_quiet_before_setup(capsys):
    get_logger("rotation_calendar.tests").info("not_shown")

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "not_shown" not in captured.err


def test_warnings_stay_off_stdout(capsys):
    get_logger("rotation_calendar.tests").warning("shown", detail=1)

    assert capsys.readouterr().out == ""


def test_bind_run_context_replaces_previous_context():
    bind_run_context(grade="dp", source="local")
    bind_run_context(grade="myp")

    assert structlog.contextvars.get_contextvars() == {"grade": "myp"}
    structlog.contextvars.clear_contextvars()
