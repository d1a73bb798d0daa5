"""One-shot site generation script.

Renders the dashboard template once and writes the HTML and text pages,
without starting the web server or the scheduler loop.

Usage:
    python -m scripts.generate_once
    or
    python scripts/generate_once.py (after pip install -e .)
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from termsite.core.config import get_settings
from termsite.core.factory import ComponentFactory
from termsite.storage.sample import seed_sample_data


async def main() -> int:
    """Run a single generation cycle."""
    settings = get_settings()
    factory = ComponentFactory(settings)

    if settings.seed_sample_data:
        storages = factory.get_storages()
        seed_sample_data(storages.metrics, storages.logs, storages.traces)

    scheduler = factory.get_scheduler()
    succeeded = await scheduler.run_once()

    for metrics in scheduler.task_metrics():
        print(f"{metrics.name}: {metrics.success_count} ok, {metrics.failure_count} failed")
    print(f"Pages written to {settings.output_dir}")

    return 0 if succeeded == len(scheduler.task_metrics()) else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
