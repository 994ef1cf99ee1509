"""
Auth routes: login form, logout, session check for the UI.
"""
import logging
from flask import Blueprint, request, session, redirect, jsonify, render_template_string

from teamboard.services.auth import authenticate, sign_out, validate_session

logger = logging.getLogger('routes.auth')

bp = Blueprint('auth', __name__)

LOGIN_PAGE = '''
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Login · Team Overview</title>
</head>
<body style="min-height:100vh;display:flex;align-items:center;justify-content:center;background:#f4f4f5;font-family:sans-serif;">
    <div style="background:white;border-radius:12px;box-shadow:0 2px 8px rgba(0,0,0,0.06);padding:2.5rem;width:100%;max-width:360px;">
        <h1 style="font-size:1.1rem;margin:0 0 1.5rem;">Team Overview</h1>
        {% if error %}
        <p style="color:#dc2626;font-size:0.8rem;">{{ error }}</p>
        {% endif %}
        <form method="POST" action="/login">
            <input type="text" name="username" autofocus placeholder="Username"
                   style="width:100%;padding:0.6rem;margin-bottom:0.75rem;">
            <input type="password" name="password" placeholder="Password"
                   style="width:100%;padding:0.6rem;margin-bottom:1rem;">
            <button type="submit" style="width:100%;padding:0.6rem;">Log in</button>
        </form>
    </div>
</body>
</html>
'''


@bp.route('/login', methods=['GET', 'POST'])
def login():
    if request.method == 'GET':
        return render_template_string(LOGIN_PAGE, error=None)

    try:
        user = authenticate(request.form.get('username', ''), request.form.get('password', ''))
    except Exception:
        return render_template_string(LOGIN_PAGE, error='Login is unavailable, try again later'), 503

    if user is None:
        return render_template_string(LOGIN_PAGE, error='Wrong username or password'), 401

    session.clear()
    session.permanent = True
    session['user_id'] = user.id
    session['user_name'] = user.name
    session['session_token'] = user.session_token
    return redirect('/')


@bp.route('/logout', methods=['GET', 'POST'])
def logout():
    sign_out(session.get('user_id'))
    session.clear()
    return redirect('/login')


@bp.route('/api/auth/session')
def current_session():
    """{"user": {...}} while the session is live, {} once it has been superseded."""
    user_id = session.get('user_id')
    if not validate_session(user_id, session.get('session_token')):
        session.clear()
        return jsonify({})
    return jsonify({'user': {'id': user_id, 'name': session.get('user_name')}})
