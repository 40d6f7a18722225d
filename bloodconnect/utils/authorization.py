from collections import namedtuple
from enum import Enum
from functools import wraps

from flask import g, flash, redirect, url_for, request, render_template

LOGIN = 'login'
LANDING = 'landing'


class Action(Enum):
    PENDING = 'pending'
    REDIRECT = 'redirect'
    ALLOW = 'allow'


class Decision(namedtuple('Decision', ['action', 'target'])):
    def __repr__(self):
        if self.target:
            return f"Decision({self.action.value} -> {self.target})"
        return f"Decision({self.action.value})"


PENDING = Decision(Action.PENDING, None)
ALLOW = Decision(Action.ALLOW, None)
REDIRECT_TO_LOGIN = Decision(Action.REDIRECT, LOGIN)
REDIRECT_TO_LANDING = Decision(Action.REDIRECT, LANDING)


def authorize(session, required_role):
    """
    Decide whether a view gated to ``required_role`` may render for ``session``.
    Pure function: the caller carries out any redirect.
    """
    if session.loading:
        return PENDING
    if not session.is_authenticated:
        return REDIRECT_TO_LOGIN
    if session.user.user_type != required_role:
        return REDIRECT_TO_LANDING
    return ALLOW


def role_required(role):
    """Gate a view to one user type, re-evaluated against the session on every request."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            decision = authorize(g.session_store.snapshot(), role)
            if decision.action is Action.PENDING:
                return render_template('main/pending.html', title='Loading'), 202
            if decision == REDIRECT_TO_LOGIN:
                flash('Please log in to access this page.', 'info')
                return redirect(url_for('auth.login', next=request.path))
            if decision == REDIRECT_TO_LANDING:
                return redirect(url_for('main.home'))
            return f(*args, **kwargs)
        return decorated_function
    return decorator
