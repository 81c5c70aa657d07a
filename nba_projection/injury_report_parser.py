"""
Official Injury Report Text Parser

Best-effort extraction of injury records from the text of the league's
official injury report after it has been pulled out of the published
document. That text is line oriented but frequently whitespace collapsed
("BostonCelticsTatum,JaysonQuestionableInjury/Illness-LeftAnkle"), so
matching is done on substrings rather than columns.

Each line goes through a tokenizer (team name, status keyword, free text)
and a small state machine:

    SEEK_TEAM -> SEEK_STATUS -> EXTRACT_NAME -> EXTRACT_DESCRIPTION

The current team carries over to continuation lines that do not repeat
it. Lines that cannot be attributed to a team, have no status, or yield
an implausible name are skipped. False negatives are acceptable; a
misattributed team or player is not, so rejection is preferred whenever
a line is ambiguous.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .models import InjuryRecord, InjuryStatus

logger = logging.getLogger(__name__)

SOURCE = 'official_report'


# =============================================================================
# LOOKUP TABLES
# =============================================================================

TEAM_NAMES: Dict[str, str] = {
    'Atlanta Hawks': 'ATL',
    'Boston Celtics': 'BOS',
    'Brooklyn Nets': 'BKN',
    'Charlotte Hornets': 'CHA',
    'Chicago Bulls': 'CHI',
    'Cleveland Cavaliers': 'CLE',
    'Dallas Mavericks': 'DAL',
    'Denver Nuggets': 'DEN',
    'Detroit Pistons': 'DET',
    'Golden State Warriors': 'GSW',
    'Houston Rockets': 'HOU',
    'Indiana Pacers': 'IND',
    'LA Clippers': 'LAC',
    'Los Angeles Clippers': 'LAC',
    'Los Angeles Lakers': 'LAL',
    'Memphis Grizzlies': 'MEM',
    'Miami Heat': 'MIA',
    'Milwaukee Bucks': 'MIL',
    'Minnesota Timberwolves': 'MIN',
    'New Orleans Pelicans': 'NOP',
    'New York Knicks': 'NYK',
    'Oklahoma City Thunder': 'OKC',
    'Orlando Magic': 'ORL',
    'Philadelphia 76ers': 'PHI',
    'Phoenix Suns': 'PHX',
    'Portland Trail Blazers': 'POR',
    'Sacramento Kings': 'SAC',
    'San Antonio Spurs': 'SAS',
    'Toronto Raptors': 'TOR',
    'Utah Jazz': 'UTA',
    'Washington Wizards': 'WAS',
}

# Checked in this order so longer keywords win over the substrings they contain
STATUS_KEYWORDS: List[Tuple[str, InjuryStatus]] = [
    ('Questionable', InjuryStatus.QUESTIONABLE),
    ('Doubtful', InjuryStatus.DOUBTFUL),
    ('Probable', InjuryStatus.PROBABLE),
    ('Available', InjuryStatus.AVAILABLE),
    ('Out', InjuryStatus.OUT),
]

# Compared against the line lowercased with all whitespace removed
HEADER_MARKERS = (
    'injuryreport:',
    'gamedate',
    'gametime',
    'playername',
    'currentstatus',
    'notyetsubmitted',
)
PAGE_MARKER = re.compile(r'page\d+of\d+')
SUFFIX = re.compile(r'\b(?:Jr|Sr)\b\.?')


def _team_patterns() -> List[Tuple[str, str]]:
    """(pattern, abbreviation) pairs, longest first, spaced and collapsed."""
    patterns = []
    for name, abbreviation in TEAM_NAMES.items():
        patterns.append((name, abbreviation))
        collapsed = name.replace(' ', '')
        if collapsed != name:
            patterns.append((collapsed, abbreviation))
    return sorted(patterns, key=lambda p: len(p[0]), reverse=True)


TEAM_PATTERNS = _team_patterns()


# =============================================================================
# TOKENIZER
# =============================================================================

class TokenKind(Enum):
    TEAM = "team"
    STATUS = "status"
    TEXT = "text"


@dataclass(frozen=True)
class Token:
    """A classified span of one report line."""
    kind: TokenKind
    text: str
    start: int
    end: int
    value: Optional[str] = None          # team abbreviation for TEAM
    status: Optional[InjuryStatus] = None


def is_header_line(line: str) -> bool:
    """Report title, column headings, page markers and unsubmitted teams."""
    compact = re.sub(r'\s+', '', line).lower()
    if any(marker in compact for marker in HEADER_MARKERS):
        return True
    return bool(PAGE_MARKER.search(compact))


def _find_team(line: str) -> Optional[Token]:
    for pattern, abbreviation in TEAM_PATTERNS:
        index = line.find(pattern)
        if index >= 0:
            return Token(TokenKind.TEAM, pattern, index, index + len(pattern), value=abbreviation)
    return None


def _find_status(line: str, offset: int) -> Optional[Token]:
    for keyword, status in STATUS_KEYWORDS:
        index = line.find(keyword, offset)
        if index >= 0:
            return Token(TokenKind.STATUS, keyword, index, index + len(keyword), status=status)
    return None


def tokenize_line(line: str) -> List[Token]:
    """
    Split one line into TEAM / STATUS / TEXT tokens in positional order.

    At most one team and one status token are produced. The status keyword
    is searched only after the team name.
    """
    tokens = []
    team = _find_team(line)
    status = _find_status(line, team.end if team else 0)

    cursor = 0
    for token in (t for t in (team, status) if t is not None):
        if token.start > cursor:
            tokens.append(Token(TokenKind.TEXT, line[cursor:token.start], cursor, token.start))
        tokens.append(token)
        cursor = token.end
    if cursor < len(line):
        tokens.append(Token(TokenKind.TEXT, line[cursor:], cursor, len(line)))

    return tokens


# =============================================================================
# NAME HANDLING
# =============================================================================

def normalize_report_name(raw: str) -> str:
    """'Jackson Jr.,Jaren' -> 'Jaren Jackson Jr.'; collapse whitespace."""
    text = re.sub(r'\s+', ' ', raw).strip(' -,')
    if ',' in text:
        last, first = text.split(',', 1)
        text = f"{first.strip()} {last.strip()}"
    return text.strip()


def is_plausible_name(name: str) -> bool:
    """At least 3 characters and two tokens, unless a Jr/Sr suffix is present."""
    if len(name) < 3:
        return False
    if len(name.split()) >= 2:
        return True
    return bool(SUFFIX.search(name))


# =============================================================================
# STATE MACHINE
# =============================================================================

class ParserState(Enum):
    SEEK_TEAM = "seek_team"
    SEEK_STATUS = "seek_status"
    EXTRACT_NAME = "extract_name"
    EXTRACT_DESCRIPTION = "extract_description"


@dataclass
class ParseResult:
    """Parsed records plus a success sentinel (False when nothing parsed)."""
    records: List[InjuryRecord] = field(default_factory=list)
    success: bool = False
    lines_seen: int = 0
    lines_skipped: int = 0

    def for_team(self, abbreviation: str) -> List[InjuryRecord]:
        return [r for r in self.records if r.team == abbreviation]

    def to_dict(self) -> Dict:
        return {
            'records': [r.to_dict() for r in self.records],
            'success': self.success,
            'lines_seen': self.lines_seen,
            'lines_skipped': self.lines_skipped,
        }


class InjuryReportParser:
    """
    Line classifier for official injury report text.

    One parser instance may be reused; `parse` resets the team context
    on every call, so the same text always yields the same records.
    """

    def __init__(self, source: str = SOURCE):
        self.source = source
        self.current_team: Optional[str] = None

    def parse(self, text) -> ParseResult:
        """
        Parse report text into injury records.

        Args:
            text: Extracted report text (str or utf-8 bytes)

        Returns:
            ParseResult; never raises
        """
        self.current_team = None
        result = ParseResult()

        if isinstance(text, bytes):
            text = text.decode('utf-8', errors='replace')
        if not isinstance(text, str) or not text.strip():
            logger.warning("Injury report text is empty, nothing to parse")
            return result

        for raw_line in text.splitlines():
            line = raw_line.strip()
            if not line or is_header_line(line):
                continue
            result.lines_seen += 1

            record = self.parse_line(line)
            if record is None:
                result.lines_skipped += 1
                continue
            result.records.append(record)

        result.success = bool(result.records)
        logger.info(
            f"Parsed {len(result.records)} injury records "
            f"({result.lines_skipped}/{result.lines_seen} lines skipped)"
        )
        return result

    def parse_line(self, line: str) -> Optional[InjuryRecord]:
        """Run one line through the state machine. Updates team context."""
        tokens = tokenize_line(line)
        names_team = any(t.kind == TokenKind.TEAM for t in tokens)
        state = ParserState.SEEK_TEAM
        name_parts: List[str] = []
        description_parts: List[str] = []
        status: Optional[InjuryStatus] = None

        for token in tokens:
            if state == ParserState.SEEK_TEAM:
                if token.kind == TokenKind.TEAM:
                    self.current_team = token.value
                    state = ParserState.SEEK_STATUS
                    continue
                if names_team or self.current_team is None:
                    # Leading text before the team name (dates, matchups)
                    continue
                state = ParserState.SEEK_STATUS

            if state == ParserState.SEEK_STATUS:
                if token.kind == TokenKind.STATUS:
                    status = token.status
                    state = ParserState.EXTRACT_DESCRIPTION
                elif token.kind == TokenKind.TEXT:
                    name_parts.append(token.text)
                    state = ParserState.EXTRACT_NAME
                continue

            if state == ParserState.EXTRACT_NAME:
                if token.kind == TokenKind.STATUS:
                    status = token.status
                    state = ParserState.EXTRACT_DESCRIPTION
                else:
                    name_parts.append(token.text)
                continue

            if state == ParserState.EXTRACT_DESCRIPTION:
                description_parts.append(token.text)

        if self.current_team is None:
            logger.debug(f"Skipping line without team context: {line!r}")
            return None
        if status is None:
            logger.debug(f"Skipping line without status: {line!r}")
            return None

        name = normalize_report_name(''.join(name_parts))
        if not is_plausible_name(name):
            logger.debug(f"Skipping implausible name {name!r}")
            return None

        return InjuryRecord(
            team=self.current_team,
            player_name=name,
            status=status,
            description=''.join(description_parts).strip(' -'),
            source=self.source,
        )


def parse_injury_report(text) -> ParseResult:
    """Parse report text with a fresh parser."""
    return InjuryReportParser().parse(text)
