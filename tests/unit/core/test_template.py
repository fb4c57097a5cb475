from pathlib import Path

from versweep.core.template import NOT_AVAILABLE, render_template, write_rendered

TEMPLATE = "Supported:\n- ap: {{ap:versions}}\n- bq: {{bq:versions}}\n"


def test_tokens_are_replaced_with_supported_text() -> None:
    rendered = render_template(TEMPLATE, "3.12", {"ap": "1.0.0-1.3.0", "bq": "2.0.0"})

    assert rendered.errors == ()
    assert rendered.filename == "python3.12.txt"
    assert rendered.text == "Supported:\n- ap: 1.0.0-1.3.0\n- bq: 2.0.0\n"


def test_unfillable_tokens_become_not_available() -> None:
    rendered = render_template(
        "{{ap:versions}} {{bq:versions}} {{ap:license}}", "3.11", {"ap": "", "cq": "1"}
    )

    assert rendered.parts == (
        "",
        NOT_AVAILABLE,
        " ",
        NOT_AVAILABLE,
        " ",
        NOT_AVAILABLE,
        "",
    )
    assert rendered.errors == (
        "No supported versions for ap",
        "No supported versions for bq",
        "Unknown action: license for package: ap",
    )
    assert rendered.filename == "python3.11.err"
    assert rendered.text.endswith(
        "\nErrors:\n"
        "No supported versions for ap\n"
        "No supported versions for bq\n"
        "Unknown action: license for package: ap\n"
    )


def test_text_without_tokens_is_unchanged() -> None:
    rendered = render_template("nothing {to} replace", "3.12", {})

    assert rendered.text == "nothing {to} replace"


def test_write_rendered(tmp_path: Path) -> None:
    rendered = render_template(TEMPLATE, "3.12", {"ap": "1.0.0"})

    path = write_rendered(tmp_path / "docs", rendered)

    assert path == tmp_path / "docs" / "python3.12.err"
    assert path.read_text(encoding="utf-8") == rendered.text
