from datetime import datetime, timezone, timedelta
import logging
import re

from lxml import etree # type: ignore

from iptvguide.services.guide_types import GuideIndex, ProgramEntry, UNKNOWN_PROGRAM_TITLE

logger = logging.getLogger(__name__)

_XMLTV_TIME_RE = re.compile(
    r"^(\d{4})(\d{2})(\d{2})(\d{2})(\d{2})(\d{2})(?:\s*([+-])(\d{2})(\d{2}))?$",
    re.ASCII,
)


class GuideParseError(ValueError):
    """Raised when guide text is not well-formed markup"""
    pass


class MalformedTimestampError(ValueError):
    """Raised when an XMLTV timestamp does not match YYYYMMDDHHMMSS [+-HHMM]"""
    pass


def parse_guide(xml_text: str | bytes) -> GuideIndex:
    """
    Parse XMLTV text into a guide index

    Args:
        xml_text: Full XMLTV document

    Returns:
        GuideIndex with channel names and per-channel programme lists sorted by start

    Raises:
        GuideParseError: If the document is not well-formed XML
    """
    logger.debug("Parsing XMLTV document...")
    root = _load_root(xml_text)
    logger.debug(f"  XML document loaded (root tag: {root.tag})")

    guide = GuideIndex()

    logger.debug("  Extracting channels...")
    _parse_channels(root, guide)
    logger.debug(f"    Found {len(guide.channel_id_to_name)} channels")

    logger.debug("  Extracting programs...")
    dropped = _parse_programs(root, guide)
    if dropped:
        logger.debug(f"    Dropped {dropped} programs with invalid timestamps")

    for programs in guide.programs_by_channel_id.values():
        # list.sort is stable: equal start times keep document order
        programs.sort(key=lambda program: program.start)

    logger.info(
        f"XMLTV parsing complete: {len(guide.channel_id_to_name)} channels, "
        f"{guide.program_count} programs"
    )

    return guide


def _load_root(xml_text: str | bytes) -> etree._Element:
    """Parse markup into an element tree, rejecting anything not well-formed"""
    if isinstance(xml_text, str):
        # Text is already decoded, so any encoding declaration must be ignored
        data = xml_text.encode("utf-8")
        parser = etree.XMLParser(encoding="utf-8", resolve_entities=False, no_network=True, huge_tree=True)
    else:
        data = xml_text
        parser = etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=True)

    if not data.strip():
        logger.error("  XML parsing error: document is empty")
        raise GuideParseError("Guide document is empty")

    try:
        return etree.fromstring(data, parser=parser)
    except etree.XMLSyntaxError as e:
        logger.error(f"  XML parsing error: {e}")
        raise GuideParseError(f"Guide is not well-formed XML: {e}") from e


def _parse_channels(root: etree._Element, guide: GuideIndex) -> None:
    """Extract channel id -> display name; later duplicates overwrite earlier ones"""
    for channel in root.iter('channel'):
        xmltv_id = channel.get('id') or ''

        # Get display name (first one or fallback to ID)
        display_name = _get_text(channel, 'display-name') or xmltv_id

        guide.channel_id_to_name[xmltv_id] = display_name


def _parse_programs(root: etree._Element, guide: GuideIndex) -> int:
    """Append programmes to their channel lists, returning the number dropped"""
    dropped = 0

    for programme in root.iter('programme'):
        channel_id = programme.get('channel') or ''
        program = _parse_single_program(programme)
        if program is None:
            dropped += 1
            continue
        guide.programs_by_channel_id.setdefault(channel_id, []).append(program)

    return dropped


def _parse_single_program(programme: etree._Element) -> ProgramEntry | None:
    """Parse single programme element"""
    start_str = programme.get('start')
    stop_str = programme.get('stop')

    # Skip if missing required fields
    if not start_str or not stop_str:
        return None

    try:
        start_time = parse_xmltv_time(start_str)
        stop_time = parse_xmltv_time(stop_str)
    except MalformedTimestampError:
        return None

    if start_time >= stop_time:
        return None

    return ProgramEntry(
        start=start_time,
        stop=stop_time,
        title=_get_text(programme, 'title') or UNKNOWN_PROGRAM_TITLE,
        description=_get_text(programme, 'desc'),
        category=_get_text(programme, 'category'),
    )


def parse_xmltv_time(time_str: str) -> datetime:
    """
    Convert XMLTV time format to a UTC datetime

    Args:
        time_str: XMLTV time like '20080715003000 -0600' (offset optional, UTC if absent)

    Returns:
        Timezone-aware datetime in UTC

    Raises:
        MalformedTimestampError: If the string is not in the strict XMLTV shape
    """
    match = _XMLTV_TIME_RE.match(time_str.strip()) if time_str else None
    if match is None:
        raise MalformedTimestampError(f"Invalid XMLTV timestamp: '{time_str}'")

    year, month, day, hour, minute, second, tz_sign_str, tz_hours_str, tz_mins_str = match.groups()

    # Parse timezone offset (+HHMM or -HHMM)
    tz_offset_minutes = 0
    if tz_sign_str:
        tz_sign = 1 if tz_sign_str == '+' else -1
        tz_offset_minutes = tz_sign * (int(tz_hours_str) * 60 + int(tz_mins_str))

    try:
        dt = datetime(int(year), int(month), int(day), int(hour), int(minute), int(second))
        # Convert to UTC
        dt_utc = dt - timedelta(minutes=tz_offset_minutes)
    except (ValueError, OverflowError) as e:
        raise MalformedTimestampError(f"Invalid XMLTV timestamp: '{time_str}'") from e

    return dt_utc.replace(tzinfo=timezone.utc)


def _get_text(element: etree._Element, tag: str, default: str = '') -> str:
    """Safely extract trimmed text (including nested markup) from the first child with the given tag"""
    child = element.find(tag)
    if child is None:
        return default
    text = ''.join(child.itertext()).strip()
    return text or default
