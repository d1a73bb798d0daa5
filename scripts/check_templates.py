"""Template validation script.

Parses every template in the configured templates directory and reports
markup errors with their line and column.

Usage:
    python -m scripts.check_templates
    or
    python scripts/check_templates.py (after pip install -e .)
"""

import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from termsite.core.config import get_settings
from termsite.interfaces.template import TemplateError
from termsite.strategies.template_engine.engine import TEMPLATE_SUFFIX
from termsite.strategies.template_engine.template import Template


def main() -> int:
    """Parse all templates and print a summary."""
    settings = get_settings()
    paths = sorted(settings.templates_dir.glob(f"*{TEMPLATE_SUFFIX}"))

    failures = 0
    for path in paths:
        try:
            template = Template.from_file(path)
        except TemplateError as e:
            failures += 1
            print(f"FAIL {path.name}: {e}")
            continue
        print(f"ok   {path.name}: {len(template.blocks)} blocks")

    print(f"{len(paths) - failures}/{len(paths)} templates parsed")
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
