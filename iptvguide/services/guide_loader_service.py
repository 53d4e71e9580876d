"""
Guide Loader Service

Runs guide parsing off the event loop with timeout protection.
Separated from the HTTP layer for better testability.
"""
import asyncio
import logging

from iptvguide.services.guide_types import GuideIndex
from iptvguide.services.xmltv_parser_service import GuideParseError, parse_guide


logger = logging.getLogger(__name__)


async def parse_guide_async(
    xml_text: str | bytes,
    *,
        parse_timeout_seconds: int | None = None
) -> GuideIndex:
    """
    Parse XMLTV text asynchronously with timeout protection.

    Parsing is offloaded to thread pool to avoid blocking event loop.

    Args:
        xml_text: Full XMLTV document

    Returns:
        Parsed GuideIndex

    Keyword Args:
        parse_timeout_seconds: Timeout in seconds for parsing (0/None disables timeout)

    Raises:
        GuideParseError: If the markup is malformed or parsing times out
    """
    logger.debug(f"  Document size: {len(xml_text) / 1024 / 1024:.2f} MB")

    effective_timeout = parse_timeout_seconds if parse_timeout_seconds and parse_timeout_seconds > 0 else None
    timeout_display = f"{effective_timeout}s" if effective_timeout else "disabled"

    try:
        loop = asyncio.get_running_loop()
        logger.debug("Offloading XML parsing to thread pool executor (timeout: %s)...", timeout_display)
        parse_task = loop.run_in_executor(None, parse_guide, xml_text)
        if effective_timeout:
            guide = await asyncio.wait_for(parse_task, timeout=effective_timeout)
        else:
            guide = await parse_task
    except asyncio.TimeoutError:
        logger.error("XML parsing timed out after %s", timeout_display)
        raise GuideParseError("XML parsing timed out - document may be too large or malformed")

    if not guide.channel_id_to_name:
        logger.warning("No channels declared in XMLTV document")

    if not guide.programs_by_channel_id:
        logger.warning("No programs with valid timestamps found in XMLTV document")

    return guide
