from functools import wraps

from flask import g, jsonify

from smartmark.services.auth import get_user


def api_auth_required(func):
    @wraps(func)
    def wrapped(*args, **kwargs):
        user = get_user()
        if not user:
            return jsonify({"error": "authentication required"}), 401
        g.api_user = user
        return func(*args, **kwargs)

    return wrapped
