"""Compare two Battle Report files and print their differences."""

from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError

from analysis.report_diff import diff_reports
from core.diff_rendering import diff_to_payload, render_diff_text
from core.parsers.battle_report import parse_battle_report
from core.report_inputs import (
    OUTPUT_FORMATS,
    dump_structured,
    magnitude_suffixes,
    read_report_text,
    separator_rules,
)


class Command(BaseCommand):
    """Parse two Battle Reports and diff their flat key/value mappings."""

    help = (
        "Compare two Battle Report text files: missing keys, value differences and keys "
        "containing invisible characters."
    )

    def add_arguments(self, parser) -> None:
        """Add command arguments."""

        parser.add_argument("path_a", help="First Battle Report text file.")
        parser.add_argument("path_b", help="Second Battle Report text file.")
        parser.add_argument("--label-a", default="Report 1", help="Display label for the first report.")
        parser.add_argument("--label-b", default="Report 2", help="Display label for the second report.")
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
        parser.add_argument(
            "--fail-on-diff",
            action="store_true",
            help="Exit with an error when the reports differ.",
        )

    def handle(self, *args, **options) -> str | None:
        """Run the command."""

        path_a: str = options["path_a"]
        path_b: str = options["path_b"]
        if path_a == "-" and path_b == "-":
            raise CommandError("Only one report can be read from stdin.")

        rules = separator_rules(punctuation_fallback=not options["no_punctuation_fallback"])
        parsed_a = parse_battle_report(read_report_text(path_a), rules=rules)
        parsed_b = parse_battle_report(read_report_text(path_b), rules=rules)

        for label, parsed in ((options["label_a"], parsed_a), (options["label_b"], parsed_b)):
            for line in parsed.diagnostics:
                self.stderr.write(f'{label}: malformed line [{line.line_number}]: "{line.raw_text}"')

        diff = diff_reports(
            parsed_a.flat,
            parsed_b.flat,
            label_a=options["label_a"],
            label_b=options["label_b"],
        )

        output_format: str = options["format"]
        if output_format == "text":
            self.stdout.write(
                render_diff_text(
                    diff,
                    flat_a=parsed_a.flat,
                    flat_b=parsed_b.flat,
                    suffixes=magnitude_suffixes(),
                )
            )
        else:
            self.stdout.write(dump_structured(diff_to_payload(diff), output_format=output_format))

        if options["fail_on_diff"] and not diff.is_identical:
            raise CommandError(f"Reports differ: {diff.summary()}")
        return None
