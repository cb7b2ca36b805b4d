"""
Command line entry point: ``python -m a2mlgen SPEC [-o OUT] [--text-only]``.
"""

import argparse
import sys
from pathlib import Path

from a2mlgen.config.settings import get_settings
from a2mlgen.core.compiler import try_compile


def main(argv=None) -> int:
    """Main entry point for the specification compiler."""
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog="a2mlgen", description="Compile an enhanced A2ML specification into Python"
    )
    parser.add_argument(
        "--version", action="version", version=f"{settings.app_name} {settings.app_version}"
    )
    parser.add_argument("spec", help="Specification file")
    parser.add_argument("-o", "--output", help="Output file, standard output when omitted")
    parser.add_argument(
        "--text-only", action="store_true", help="Write only the canonical plain A2ML text"
    )
    args = parser.parse_args(argv)

    spec_path = Path(args.spec)
    if not spec_path.exists():
        print(f"Specification file does not exist: {spec_path}", file=sys.stderr)
        return 1

    result = try_compile(spec_path.read_text(encoding="utf-8"))
    if not result.success:
        for error in result.errors:
            print(f"{spec_path}: {error}", file=sys.stderr)
        return 1

    output = result.module.canonical_text + "\n" if args.text_only else result.module.source
    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(output, encoding="utf-8")
    else:
        sys.stdout.write(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
