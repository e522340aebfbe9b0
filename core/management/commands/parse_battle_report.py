"""Parse a Battle Report file and print its sections and diagnostics."""

from __future__ import annotations

from django.core.management.base import BaseCommand

from core.diff_rendering import parsed_report_to_payload, render_parsed_report_text
from core.parsers.battle_report import parse_battle_report
from core.report_inputs import OUTPUT_FORMATS, dump_structured, read_report_text, separator_rules


class Command(BaseCommand):
    """Parse one Battle Report and show the section-scoped label/value pairs."""

    help = "Parse a Battle Report text file (or `-` for stdin) and print its fields."

    def add_arguments(self, parser) -> None:
        """Add command arguments."""

        parser.add_argument("path", help="Battle Report text file, or `-` to read stdin.")
        parser.add_argument(
            "--format",
            choices=OUTPUT_FORMATS,
            default="text",
            help="Output format.",
        )
        parser.add_argument(
            "--no-punctuation-fallback",
            action="store_true",
            help="Only split on whitespace runs and tabs; ignore `:`, `|` and `-`.",
        )

    def handle(self, *args, **options) -> str | None:
        """Run the command."""

        raw_text = read_report_text(options["path"])
        parsed = parse_battle_report(
            raw_text,
            rules=separator_rules(punctuation_fallback=not options["no_punctuation_fallback"]),
        )

        output_format: str = options["format"]
        if output_format == "text":
            self.stdout.write(render_parsed_report_text(parsed))
        else:
            self.stdout.write(dump_structured(parsed_report_to_payload(parsed), output_format=output_format))

        if parsed.diagnostics:
            self.stderr.write(f"{len(parsed.diagnostics)} malformed line(s).")
        return None
