"""Export system templates.

Writes each catalog template as a legacy template module (``--format
source``) or as preserved markup with ``{{variable}}`` tokens kept intact
(``--format html``), ready for an external sender to fill in.

Usage:
    python -m scripts.export_templates --out build/emails
    python -m scripts.export_templates --out build/emails --format html qr_daily dunning_soft
"""

import argparse
import logging
import sys
from pathlib import Path

from mailblocks.core.factory import get_factory
from mailblocks.core.logging_config import setup_logging
from mailblocks.strategies.email_engine.catalog import get_system_template, get_system_template_slugs
from mailblocks.strategies.email_engine.models import RenderMode

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Export system email templates.")
    parser.add_argument("--out", type=Path, required=True, help="Output directory")
    parser.add_argument(
        "--format",
        choices=("source", "html"),
        default="source",
        help="Legacy module source or preserved markup (default: source)",
    )
    parser.add_argument("slugs", nargs="*", help="Template slugs (default: all)")
    return parser.parse_args(argv)


def export_templates(out_dir: Path, fmt: str, slugs: list[str]) -> list[Path]:
    """Write the requested templates into ``out_dir``.

    Args:
        out_dir: Destination directory, created if missing.
        fmt: ``source`` or ``html``.
        slugs: Catalog slugs to export.

    Returns:
        Paths of the written files.

    Raises:
        ValueError: If a slug is not a system template.
    """
    factory = get_factory()
    out_dir.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []

    for slug in slugs:
        template = get_system_template(slug)
        if template is None:
            raise ValueError(f"Unknown system template: {slug}")

        if fmt == "source":
            generator = factory.get_generator()
            path = out_dir / generator.module_filename(template)
            content = generator.generate(template)
        else:
            path = out_dir / f"{slug}.html"
            content = factory.get_renderer().render(template, mode=RenderMode.PRESERVE).html

        path.write_text(content, encoding="utf-8")
        logger.info(f"Wrote {path}")
        written.append(path)

    return written


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging()
    slugs = args.slugs or get_system_template_slugs()
    try:
        written = export_templates(args.out, args.format, slugs)
    except ValueError as e:
        logger.error(str(e))
        return 1
    print(f"Exported {len(written)} template(s) to {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
