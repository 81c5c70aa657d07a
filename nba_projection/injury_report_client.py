"""
Official NBA Injury Report Client

Downloads the league's official injury report for a date and parses it.

Reports are published at fixed slots (see INJURY_REPORT_TIMES) as
    {base_url}/Injury-Report_{YYYY-MM-DD}_{HH}{AM|PM}.pdf

The client starts at the latest slot that is not in the future (Eastern
time) and walks strictly backward until one report downloads and parses.
Text extraction from the document is pluggable; the default reads the
PDF with PyPDF2.
"""

import io
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Callable, List, Optional
from zoneinfo import ZoneInfo

import requests
from PyPDF2 import PdfReader

from .config import INJURY_REPORT_TIMES, ReportSlot, get_settings
from .injury_report_parser import InjuryReportParser
from .models import InjuryRecord

logger = logging.getLogger(__name__)

ET = ZoneInfo('America/New_York')

TextExtractor = Callable[[bytes], str]


def extract_pdf_text(content: bytes) -> str:
    """Concatenated text of every page of a PDF document."""
    reader = PdfReader(io.BytesIO(content))
    return '\n'.join(page.extract_text() or '' for page in reader.pages)


@dataclass
class InjuryReport:
    """Result of fetching the official report for one date."""
    records: List[InjuryRecord] = field(default_factory=list)
    success: bool = False
    url: Optional[str] = None
    slot: Optional[str] = None
    attempts: int = 0

    @property
    def report_enhanced(self) -> bool:
        """True when records came from an official report."""
        return self.success

    def for_team(self, abbreviation: str) -> List[InjuryRecord]:
        return [r for r in self.records if r.team == abbreviation]

    def to_dict(self):
        return {
            'records': [r.to_dict() for r in self.records],
            'success': self.success,
            'url': self.url,
            'slot': self.slot,
            'attempts': self.attempts,
        }


class InjuryReportClient:
    """
    Fetches official injury reports with a backward slot fallback.

    Features:
    - Report URL per date and publication slot
    - Strictly backward fallback through earlier slots
    - Pluggable text extractor (PDF by default)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        extractor: Optional[TextExtractor] = None,
        session: Optional[requests.Session] = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.injury_report_base_url).rstrip('/')
        self.timeout = timeout or settings.request_timeout
        self.extractor = extractor or extract_pdf_text
        self.session = session or requests.Session()
        self.parser = InjuryReportParser()

    def report_url(self, report_date: date, slot: ReportSlot) -> str:
        return f"{self.base_url}/Injury-Report_{report_date.isoformat()}_{slot.label}.pdf"

    def candidate_slots(self, report_date: date, now: Optional[datetime] = None) -> List[ReportSlot]:
        """
        Slots to try for a date, latest first.

        Today: only slots already published. Past dates: every slot.
        Future dates: none.
        """
        now = now or datetime.now(ET)
        today = now.date()

        if report_date > today:
            return []
        if report_date < today:
            return list(reversed(INJURY_REPORT_TIMES))

        current = (now.hour, now.minute)
        published = [s for s in INJURY_REPORT_TIMES if (s.hour, s.minute) <= current]
        return list(reversed(published))

    def _download(self, url: str) -> Optional[bytes]:
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            return response.content
        except requests.RequestException as e:
            logger.warning(f"Injury report not available at {url}: {e}")
            return None

    def fetch(self, report_date: Optional[date] = None, now: Optional[datetime] = None) -> InjuryReport:
        """
        Fetch and parse the most recent available report for a date.

        Returns:
            InjuryReport (success=False with no records if every slot failed)
        """
        now = now or datetime.now(ET)
        report_date = report_date or now.date()
        report = InjuryReport()

        for slot in self.candidate_slots(report_date, now):
            url = self.report_url(report_date, slot)
            report.attempts += 1

            content = self._download(url)
            if content is None:
                continue

            try:
                text = self.extractor(content)
            except Exception as e:
                logger.warning(f"Could not extract text from {url}: {e}")
                continue

            parsed = self.parser.parse(text)
            if not parsed.success:
                logger.warning(f"No injury records parsed from {url}")
                continue

            report.records = parsed.records
            report.success = True
            report.url = url
            report.slot = slot.label
            logger.info(
                f"Loaded {len(parsed.records)} injury records from {slot.label} report "
                f"({report.attempts} attempt(s))"
            )
            return report

        logger.warning(f"No official injury report found for {report_date} after {report.attempts} attempt(s)")
        return report


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

_client: Optional[InjuryReportClient] = None


def get_injury_report_client() -> InjuryReportClient:
    """Get singleton injury report client instance."""
    global _client
    if _client is None:
        _client = InjuryReportClient()
    return _client
