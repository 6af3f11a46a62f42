"""Entry points for a scheduled export run.

- ``handler(event, context)``: AWS Lambda style handler; the event is ignored.
- ``main()``: console script ``auditvault-export``; exits non-zero on failure.
"""

import asyncio
import sys
from typing import Any, Dict, Optional

from auditvault.core.config import Settings, get_settings
from auditvault.core.exceptions import AuditVaultException, ConfigurationError
from auditvault.core.logging import configure_logging, logger
from auditvault.platform.export.factory import build_export_context
from auditvault.platform.export.orchestrator import ExportOrchestrator
from auditvault.schemas.export import ExportResult


async def run_export(settings: Optional[Settings] = None) -> ExportResult:
    """Run one export cycle.

    Raises:
        ConfigurationError: If settings cannot be loaded
        ExportFailedError: If the cycle fails before the checkpoint is advanced
    """
    settings = settings or get_settings()
    async with build_export_context(settings) as context:
        return await ExportOrchestrator(context).run()


def handler(event: Any = None, context: Any = None) -> Dict[str, Any]:
    """Scheduled-invocation handler.

    Any raised exception marks the invocation as failed for the host.
    """
    try:
        settings = get_settings()
    except ConfigurationError:
        configure_logging()
        logger.error("Missing or invalid configuration, no export attempted", exc_info=True)
        raise

    configure_logging(settings.LOG_LEVEL)
    result = asyncio.run(run_export(settings))
    return result.to_dict()


def main() -> None:
    """Console entry point."""
    try:
        summary = handler()
    except AuditVaultException as e:
        logger.error(f"Export failed: {e}")
        sys.exit(1)
    logger.info(f"Export finished: {summary}")


if __name__ == "__main__":
    main()
