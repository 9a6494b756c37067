"""
Tests for command line parsing and headless highlighting.
"""

import logging

import pytest

import main
from main import CommandLineArgs, OutputFormat, StartupMode, parse_arguments, run_highlight
from ourodocs.services.settings import Theme


@pytest.fixture
def source_file(tmp_path):
    path = tmp_path / "demo.ouro"
    path.write_text("let x = 1; // one\n", encoding="utf-8")
    return path


@pytest.fixture
def restore_logging():
    """Undo the handler setup done by main()."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if isinstance(handler.formatter, main.LogFormatter):
            root.removeHandler(handler)
    root.setLevel(level)


def test_defaults():
    args = parse_arguments([])
    assert args.mode is StartupMode.VIEWER
    assert args.document_path is None
    assert args.output_format is OutputFormat.TOKENS
    assert args.theme is None
    assert args.log_level == "INFO"


def test_highlight_options():
    args = parse_arguments([
        "--highlight", "demo.ouro", "--language", "ouro", "--format", "html",
        "-o", "out.html", "--theme", "dark", "--config", "s.json", "--reset-settings",
    ])
    assert args.mode is StartupMode.HIGHLIGHT
    assert args.highlight_path == "demo.ouro"
    assert args.language == "ouro"
    assert args.output_format is OutputFormat.HTML
    assert args.output_path == "out.html"
    assert args.theme is Theme.DARK
    assert args.config_file == "s.json"
    assert args.reset_settings


@pytest.mark.parametrize("flag", ["-v", "--debug"])
def test_verbose_flags_enable_debug_logging(flag):
    assert parse_arguments([flag]).log_level == "DEBUG"


def test_document_argument():
    assert parse_arguments(["guide.md"]).document_path == "guide.md"


def test_invalid_format_exits():
    with pytest.raises(SystemExit):
        parse_arguments(["--format", "pdf"])


def test_token_output(source_file, capsys):
    args = CommandLineArgs(highlight_path=str(source_file), mode=StartupMode.HIGHLIGHT)

    assert run_highlight(args) == 0

    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "0\tkeyword\t'let'"
    assert lines[1] == "3\tplain\t' x '"
    assert "11\tcomment\t'// one'" in lines
    assert lines[-1] == "17\tplain\t'\\n'"


def test_html_output_to_file(source_file, tmp_path, capsys):
    output = tmp_path / "out.html"
    args = CommandLineArgs(
        highlight_path=str(source_file),
        output_format=OutputFormat.HTML,
        output_path=str(output),
    )

    assert run_highlight(args) == 0

    markup = output.read_text(encoding="utf-8")
    assert markup.startswith('<pre class="language-ouroboros">')
    assert '<span class="token comment">// one</span>' in markup
    assert capsys.readouterr().out == ""


def test_language_option_overrides_extension(tmp_path, capsys):
    path = tmp_path / "snippet.txt"
    path.write_text("PI", encoding="utf-8")

    assert run_highlight(CommandLineArgs(highlight_path=str(path), language="ouro")) == 0
    assert capsys.readouterr().out == "0\tconstant\t'PI'\n"


def test_unknown_extension_fails(tmp_path, caplog):
    path = tmp_path / "snippet.txt"
    path.write_text("x", encoding="utf-8")

    with caplog.at_level(logging.ERROR):
        assert run_highlight(CommandLineArgs(highlight_path=str(path))) == 1
    assert "--language" in caplog.text


def test_unknown_language_fails(source_file, caplog):
    with caplog.at_level(logging.ERROR):
        assert run_highlight(CommandLineArgs(highlight_path=str(source_file), language="cobol")) == 1
    assert "cobol" in caplog.text


def test_missing_file_fails(tmp_path, caplog):
    with caplog.at_level(logging.ERROR):
        assert run_highlight(CommandLineArgs(highlight_path=str(tmp_path / "gone.ouro"))) == 1
    assert "File not found" in caplog.text


def test_main_highlight(source_file, capsys, restore_logging):
    assert main.main(["--highlight", str(source_file), "--log-level", "ERROR"]) == 0
    assert capsys.readouterr().out.startswith("0\tkeyword\t'let'\n")


def test_command_line_theme_is_not_persisted(tmp_path):
    config = tmp_path / "settings.json"
    args = CommandLineArgs(theme=Theme.DARK, config_file=str(config))

    manager = main.setup_settings(args)

    assert main.session_theme(args, manager) is Theme.DARK
    assert manager.settings.ui.theme is Theme.LIGHT

    # Anything else that saves during the session must not write the override
    assert manager.save()
    assert main.SettingsManager(config).settings.ui.theme is Theme.LIGHT


def test_saved_theme_used_without_command_line_choice(tmp_path):
    config = tmp_path / "settings.json"
    main.SettingsManager(config).set_theme(Theme.DARK)

    args = CommandLineArgs(config_file=str(config))
    assert main.session_theme(args, main.setup_settings(args)) is Theme.DARK


def test_logs_live_beside_settings():
    assert main.LOGS_DIR.parent == main.SettingsManager.config_dir()


def test_unwritable_log_file_falls_back_to_console(tmp_path, restore_logging, capsys):
    blocker = tmp_path / "not-a-directory"
    blocker.write_text("", encoding="utf-8")

    logger = main.setup_logging("INFO", blocker / "logs" / "ourodocs.log")

    assert all(not isinstance(handler, logging.FileHandler) for handler in logger.handlers)
    assert "Logging to console only" in capsys.readouterr().err


def test_load_bundled_guide():
    document = main.load_document(main.GUIDE_PATH)
    assert document is not None
    assert document.title == "Ouroboros Language Guide"


def test_load_missing_document(tmp_path):
    assert main.load_document(tmp_path / "missing.md") is None
