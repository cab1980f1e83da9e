from flask import render_template, request
from . import main_bp
from ..queries import get_leaderboard_view


@main_bp.route('/')
def home():
    view = get_leaderboard_view(request.args.get('q', ''))
    return render_template('leaderboard.html', view=view)
