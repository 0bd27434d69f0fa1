"""Bound the plugin message to what the Opsview transport accepts."""

from __future__ import annotations

from winupdate_probe.models import Classification, PerfData, ProbeResult, ProbeStatus

# Opsview accepts 1024 bytes per result; 48 of those are kept for perfdata.
TRANSPORT_LIMIT = 1024
PERFDATA_RESERVE = 48
MAX_MESSAGE_LENGTH = 975

# Characters Windows Update titles commonly carry on localized systems,
# mapped to plain ASCII. Anything not listed passes through unchanged.
CHAR_MAP: dict[str, str] = {
    "ä": "ae",
    "ö": "oe",
    "ü": "ue",
    "Ä": "Ae",
    "Ö": "Oe",
    "Ü": "Ue",
    "ß": "ss",
    "à": "a",
    "á": "a",
    "â": "a",
    "À": "A",
    "Á": "A",
    "Â": "A",
    "ç": "c",
    "Ç": "C",
    "è": "e",
    "é": "e",
    "ê": "e",
    "ë": "e",
    "È": "E",
    "É": "E",
    "Ê": "E",
    "î": "i",
    "ï": "i",
    "í": "i",
    "ñ": "n",
    "Ñ": "N",
    "ó": "o",
    "ô": "o",
    "ú": "u",
    "û": "u",
    "ù": "u",
    "ø": "o",
    "Ø": "O",
    "å": "a",
    "Å": "A",
    "æ": "ae",
    "Æ": "Ae",
    "œ": "oe",
    "Œ": "Oe",
    "–": "-",   # en dash
    "—": "-",   # em dash
    "‘": "'",
    "’": "'",
    "“": '"',
    "”": '"',
    "„": '"',
    "«": '"',
    "»": '"',
    "\u00a0": " ",  # no-break space
    "®": "(R)",
    "™": "(TM)",
    "©": "(C)",
}

_TRANSLATION = str.maketrans(CHAR_MAP)


def transliterate(text: str) -> str:
    """Replace accented and typographic characters with ASCII equivalents."""
    return text.translate(_TRANSLATION)


def truncate(text: str, limit: int = MAX_MESSAGE_LENGTH) -> str:
    """Cut text to at most ``limit`` characters. No ellipsis, no word boundaries."""
    return text[:limit]


def format_result(
    status: ProbeStatus,
    raw_message: str,
    classification: Classification | None,
) -> ProbeResult:
    """Build the final ProbeResult.

    The message is transliterated and truncated only when critical or
    optional updates are pending. The fixed OK and reboot messages are short
    ASCII already and go out verbatim. Perfdata is omitted when there is
    no classification (the pending-reboot branch).
    """
    if classification is None:
        return ProbeResult(status=status, message=raw_message)

    message = raw_message
    if classification.critical_count + classification.optional_count > 0:
        message = truncate(transliterate(message))

    return ProbeResult(
        status=status,
        message=message,
        perf_data=PerfData.from_classification(classification),
    )
