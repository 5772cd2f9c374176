"""CLI parser and command behaviour tests."""

from __future__ import annotations

import pytest

from mdxport.cli import _build_parser, main


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "scan", "page.mdx"])
    assert args.verbose is True
    assert args.command == "scan"


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["convert", "page.mdx", "--verbose"])
    assert args.verbose is True
    assert args.command == "convert"


def test_cli_accepts_convert_flags() -> None:
    parser = _build_parser()
    args = parser.parse_args(["convert", "page.mdx", "--dry-run", "--no-ai", "-o", "out.mdx"])
    assert args.dry_run is True
    assert args.no_ai is True
    assert args.output == "out.mdx"


def test_scan_command_prints_inventory(document_builder, capsys) -> None:
    document_builder.write({"page.mdx": "# Page\n\n<WarningBanner>Careful</WarningBanner>\n"})

    main(["scan", str(document_builder.path("page.mdx"))])

    out = capsys.readouterr().out
    assert "1 unknown component(s):" in out
    assert "<WarningBanner> usages=1 definition=no category=alert (high)" in out


def test_scan_command_reports_clean_documents(document_builder, capsys) -> None:
    document_builder.write({"page.mdx": '<Callout kind="info">Hi</Callout>\n'})

    main(["scan", str(document_builder.path("page.mdx"))])

    assert "No unknown components found." in capsys.readouterr().out


def test_convert_dry_run_prints_diff_without_writing(document_builder, capsys) -> None:
    document_builder.write({"page.mdx": '# Page\n\n<Accordion title="Q">A</Accordion>\n'})

    main(["convert", str(document_builder.path("page.mdx")), "--dry-run", "--no-ai"])

    out = capsys.readouterr().out
    assert "Conversion changes (dry-run):" in out
    assert '+<Expandable title="Q">A</Expandable>' in out
    assert not document_builder.path("page.converted.mdx").exists()


def test_convert_writes_output_and_reports_warnings(document_builder, capsys) -> None:
    document_builder.write({"page.mdx": "# Page\n\n<Foo />\n"})

    main(["convert", str(document_builder.path("page.mdx")), "--no-ai"])

    out = capsys.readouterr().out
    written = document_builder.path("page.converted.mdx")
    assert written.exists()
    assert "MANUAL REVIEW NEEDED: <Foo>" in written.read_text(encoding="utf-8")
    assert "warning: Generative conversion disabled" in out


def test_missing_document_exits_with_error(tmp_path, capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["scan", str(tmp_path / "missing.mdx")])

    assert excinfo.value.code == 1
    assert "No such document" in capsys.readouterr().err


def test_unsupported_document_type_exits_with_error(document_builder, capsys) -> None:
    document_builder.write({"notes.txt": "plain text\n"})

    with pytest.raises(SystemExit) as excinfo:
        main(["convert", str(document_builder.path("notes.txt"))])

    assert excinfo.value.code == 1
    assert "Unsupported document type" in capsys.readouterr().err
