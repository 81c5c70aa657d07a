"""
Tests for the official injury report text parser.
"""

from nba_projection.injury_report_parser import (
    InjuryReportParser,
    TokenKind,
    is_header_line,
    is_plausible_name,
    normalize_report_name,
    parse_injury_report,
    tokenize_line,
)
from nba_projection.models import InjuryStatus


class TestSampleReport:

    def test_records_extracted(self, sample_report_text):
        result = parse_injury_report(sample_report_text)
        assert result.success
        assert [(r.team, r.player_name, r.status) for r in result.records] == [
            ('BOS', 'Jayson Tatum', InjuryStatus.QUESTIONABLE),
            ('BOS', 'Kristaps Porzingis', InjuryStatus.OUT),
            ('NYK', 'Jalen Brunson', InjuryStatus.PROBABLE),
            ('NYK', 'Mitchell Robinson', InjuryStatus.OUT),
        ]
        assert result.lines_seen == 4
        assert result.lines_skipped == 0

    def test_descriptions_and_source(self, sample_report_text):
        records = parse_injury_report(sample_report_text).records
        assert records[0].description == 'Injury/Illness - Right Knee; Bursitis'
        assert records[3].description == 'Injury/Illness-LeftAnkle;Surgery'
        assert {r.source for r in records} == {'official_report'}

    def test_for_team(self, sample_report_text):
        result = parse_injury_report(sample_report_text)
        assert [r.player_name for r in result.for_team('NYK')] == ['Jalen Brunson', 'Mitchell Robinson']

    def test_bytes_input(self, sample_report_text):
        result = parse_injury_report(sample_report_text.encode('utf-8'))
        assert len(result.records) == 4


class TestMalformedInput:

    def test_empty_text(self):
        result = parse_injury_report('')
        assert not result.success
        assert result.records == []
        assert not parse_injury_report('   \n\n').success

    def test_non_text_input(self):
        assert not parse_injury_report(None).success

    def test_line_without_team_context(self):
        result = parse_injury_report('Tatum, Jayson Out Injury/Illness - Rest')
        assert result.records == []
        assert result.lines_skipped == 1

    def test_line_without_status(self):
        result = parse_injury_report('Boston Celtics Tatum, Jayson Injury/Illness - Rest')
        assert result.records == []
        assert not result.success

    def test_implausible_name_rejected(self):
        result = parse_injury_report('Boston Celtics Tatum Out Rest')
        assert result.records == []

    def test_team_context_survives_rejected_line(self):
        text = "\n".join([
            'Boston Celtics Tatum Out Rest',
            'Brown, Jaylen Questionable Injury/Illness - Hip',
        ])
        records = parse_injury_report(text).records
        assert [(r.team, r.player_name) for r in records] == [('BOS', 'Jaylen Brown')]

    def test_team_resets_between_calls(self):
        parser = InjuryReportParser()
        parser.parse('Boston Celtics Tatum, Jayson Out Rest')
        result = parser.parse('Porzingis, Kristaps Out Injury/Illness - Ankle')
        assert result.records == []

    def test_same_text_same_records(self, sample_report_text):
        parser = InjuryReportParser()
        first = parser.parse(sample_report_text).records
        second = parser.parse(sample_report_text).records
        assert first == second

    def test_suffix_names(self):
        records = parse_injury_report('Memphis Grizzlies Jackson Jr., Jaren Doubtful Injury/Illness - Knee').records
        assert records[0].player_name == 'Jaren Jackson Jr.'
        assert records[0].status == InjuryStatus.DOUBTFUL

    def test_available_status(self):
        records = parse_injury_report('Miami Heat Butler, Jimmy Available Injury/Illness - Ankle').records
        assert records[0].status == InjuryStatus.AVAILABLE
        assert records[0].team == 'MIA'


class TestLineHelpers:

    def test_header_lines(self):
        assert is_header_line('Injury Report: 01/15/25 05:30 PM')
        assert is_header_line('Page 2 of 5')
        assert is_header_line('Game Date Game Time Matchup Team Player Name Current Status Reason')
        assert is_header_line('Utah Jazz NOT YET SUBMITTED')
        assert not is_header_line('Utah Jazz Markkanen, Lauri Out Rest')

    def test_tokenizer_order(self):
        tokens = tokenize_line('Boston Celtics Tatum, Jayson Out Rest')
        assert [t.kind for t in tokens] == [TokenKind.TEAM, TokenKind.TEXT, TokenKind.STATUS, TokenKind.TEXT]
        assert tokens[0].value == 'BOS'
        assert tokens[2].status == InjuryStatus.OUT

    def test_status_only_searched_after_team(self):
        tokens = tokenize_line('Out Boston Celtics Tatum, Jayson')
        assert [t.kind for t in tokens] == [TokenKind.TEXT, TokenKind.TEAM, TokenKind.TEXT]

    def test_collapsed_team_name(self):
        tokens = tokenize_line('PortlandTrailBlazersSimons,Anfernee')
        assert tokens[0].kind == TokenKind.TEAM
        assert tokens[0].value == 'POR'

    def test_name_normalization(self):
        assert normalize_report_name('Tatum,  Jayson ') == 'Jayson Tatum'
        assert normalize_report_name('Jackson Jr.,Jaren') == 'Jaren Jackson Jr.'
        assert normalize_report_name('Jayson Tatum') == 'Jayson Tatum'

    def test_plausible_names(self):
        assert is_plausible_name('Jayson Tatum')
        assert not is_plausible_name('Tatum')
        assert not is_plausible_name('Al')
