import logging

from .errors import ExportFailed
from .models import AdvisoryResult
from .narrative import build_full_card

logger = logging.getLogger(__name__)


def export_card(result: AdvisoryResult, path: str) -> str:
    """Write the full advisory card to ``path`` and return the text written."""
    text = build_full_card(result)
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
    except OSError as e:
        raise ExportFailed(f"Failed to export card to {path}: {e}") from e
    logger.info("Exported advisory card to %s", path)
    return text
