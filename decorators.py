# decorators.py
from functools import wraps
from flask import session, jsonify

FINANCE_ROLES = ('admin', 'manager')

def current_user():
    return session.get('user')

def protected(f):
    @wraps(f)
    def wrapper(*args, **kwargs):
        if not session.get('authenticated'):
            return jsonify({'error': {'code': 'unauthorized', 'message': 'Authentication required'}}), 401
        return f(*args, **kwargs)
    return wrapper

def manager_or_admin(f):
    @wraps(f)
    @protected
    def wrapper(*args, **kwargs):
        if session.get('role') not in FINANCE_ROLES:
            return jsonify({'error': {'code': 'forbidden', 'message': 'Manager or admin role required'}}), 403
        return f(*args, **kwargs)
    return wrapper
