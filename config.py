import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))
DATASET_PATH = os.path.join(BASE_DIR, 'data', 'leaderboard.csv')


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY', 'change-me')
    DEBUG = True
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # file path or http(s) URL of the campaign export
    LEADERBOARD_SOURCE = os.environ.get('LEADERBOARD_SOURCE', DATASET_PATH)
    LEADERBOARD_FETCH_TIMEOUT = float(os.environ.get('LEADERBOARD_FETCH_TIMEOUT', '10'))
    LEADERBOARD_DEADLINE = os.environ.get('LEADERBOARD_DEADLINE', '2025-10-31T23:59:59')
    LEADERBOARD_LAST_UPDATED = os.environ.get('LEADERBOARD_LAST_UPDATED', '2025-10-26')
    LEADERBOARD_COLUMNS = {
        'name': 'User Name',
        'skill_badges': '# of Skill Badges Completed',
        'arcade_points': '# of Arcade Games Completed',
        'profile_url': 'Google Cloud Skills Boost Profile URL',
    }
    LEADERBOARD_PRIZE_TIERS = (
        ('Tier 1', 100),
        ('Tier 2', 70),
        ('Tier 3', 50),
    )
