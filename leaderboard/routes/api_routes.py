from flask import jsonify, request
from . import api_bp
from ..queries import (
    get_leaderboard_view,
    refresh_leaderboard,
    get_countdown,
)


@api_bp.route('/leaderboard')
def api_leaderboard():
    view = get_leaderboard_view(request.args.get('q', ''))
    if not view.is_ready:
        return jsonify(view.as_dict()), 502
    return jsonify(view.as_dict())


@api_bp.route('/leaderboard/refresh', methods=['POST'])
def api_refresh_leaderboard():
    """Re-read the dataset and rebuild the ranking from scratch."""
    view = refresh_leaderboard()
    if not view.is_ready:
        return jsonify(view.as_dict()), 502
    return jsonify({
        'status': view.status,
        'total_participants': view.total_participants,
    })


@api_bp.route('/countdown')
def api_countdown():
    return jsonify(get_countdown())
