from datetime import datetime

import pytest

from leaderboard.errors import FetchError, ParseError
from leaderboard.ranking import ColumnMapping, derive
from leaderboard.view_model import (
    PrizeTier,
    ViewSettings,
    avatar_initial,
    build_view,
    medal_for_rank,
    qualifying_tiers,
)

COLUMNS = ColumnMapping(name='name', skill_badges='skill', arcade_points='arcade', profile_url='url')
SETTINGS = ViewSettings(
    deadline=datetime(2025, 10, 31, 23, 59, 59),
    last_updated=datetime(2025, 10, 26),
    tiers=(PrizeTier('Tier 1', 3), PrizeTier('Tier 2', 2), PrizeTier('Tier 3', 1)),
)
NOW = datetime(2025, 10, 30, 23, 59, 59)


def sample_ranking():
    return derive([
        {'name': 'dana', 'skill': '2', 'arcade': '0'},
        {'name': 'Eli', 'skill': '8', 'arcade': '1', 'url': 'https://p/eli'},
        {'name': 'Fay', 'skill': '5', 'arcade': '0'},
        {'name': 'danny', 'skill': '1', 'arcade': '0'},
    ], COLUMNS)


def test_ready_view_keeps_global_ranks():
    view = build_view(sample_ranking(), 'dan', NOW, SETTINGS)

    assert view.is_ready
    assert view.total_participants == 4
    assert [(row.rank, row.participant.name) for row in view.rows] == [(3, 'dana'), (4, 'danny')]
    assert view.rows[0].medal == 'bronze'
    assert view.rows[0].tiers == ('Tier 1',)
    assert view.time_left.days == 1


def test_blank_query_shows_everyone():
    view = build_view(sample_ranking(), '', NOW, SETTINGS)

    assert [row.rank for row in view.rows] == [1, 2, 3, 4]
    assert [row.medal for row in view.rows] == ['gold', 'silver', 'bronze', None]
    assert view.rows[0].tiers == ('Tier 1', 'Tier 2', 'Tier 3')


def test_error_view_has_no_rows():
    view = build_view(FetchError('data.csv', status_code=404), 'eli', NOW, SETTINGS)

    assert not view.is_ready
    assert view.rows == ()
    assert view.error == 'Failed to load CSV file'
    assert view.as_dict()['error'] == 'Failed to load CSV file'


def test_parse_error_message():
    view = build_view(ParseError('data.csv', 'EOF inside string'), '', NOW, SETTINGS)
    assert view.error == 'Failed to parse CSV file'


def test_build_view_rejects_unknown_outcome():
    with pytest.raises(TypeError):
        build_view(['not', 'a', 'ranking'], '', NOW, SETTINGS)


def test_as_dict_payload():
    payload = build_view(sample_ranking(), 'eli', NOW, SETTINGS).as_dict()

    assert payload['status'] == 'ready'
    assert payload['result_count'] == 1
    assert payload['rows'][0] == {
        'rank': 1,
        'key': 'https://p/eli',
        'name': 'Eli',
        'initial': 'E',
        'skill_badges': 8,
        'arcade_points': 1,
        'score': 9,
        'profile_url': 'https://p/eli',
        'medal': 'gold',
        'tiers': ['Tier 1', 'Tier 2', 'Tier 3'],
    }
    assert payload['deadline_label'] == '31 Oct 2025'
    assert payload['last_updated'] == '26 Oct 2025'
    assert 'error' not in payload


def test_helpers():
    assert medal_for_rank(4) is None
    assert avatar_initial('zoe') == 'Z'
    assert avatar_initial('  ') == '?'
    assert qualifying_tiers(70, (PrizeTier('Tier 1', 100), PrizeTier('Tier 2', 70), PrizeTier('Tier 3', 50))) == ('Tier 1', 'Tier 2')


def test_settings_from_config():
    settings = ViewSettings.from_config({
        'LEADERBOARD_DEADLINE': '2025-10-31T23:59:59',
        'LEADERBOARD_LAST_UPDATED': '2025-10-26',
        'LEADERBOARD_PRIZE_TIERS': (('Tier 1', 100),),
    })

    assert settings.deadline == datetime(2025, 10, 31, 23, 59, 59)
    assert settings.tiers == (PrizeTier('Tier 1', 100),)
