"""
Server-rendered pages: the login form and the admin dashboard.
"""
from urllib.parse import urlparse

from flask import Blueprint, redirect, render_template, request, url_for
from flask_login import current_user, login_required, login_user, logout_user

from clinic_admin.models import Appointment, Blog, Doctor, Patient, Service, User
from clinic_admin.models.appointment import BOOKED
from clinic_admin.services import user_service

pages_bp = Blueprint('pages', __name__)


def _safe_next(target):
    """Only follow same-site relative redirects."""
    if not target:
        return None
    parsed = urlparse(target)
    if parsed.scheme or parsed.netloc or not target.startswith('/') or target.startswith('//'):
        return None
    return target


@pages_bp.route('/')
def index():
    return redirect(url_for('pages.dashboard'))


@pages_bp.route('/login', methods=['GET', 'POST'])
def login():
    next_url = _safe_next(request.values.get('next'))
    if current_user.is_authenticated:
        return redirect(next_url or url_for('pages.dashboard'))

    error = None
    email = ''
    if request.method == 'POST':
        email = request.form.get('email', '').strip()
        password = request.form.get('password', '')
        if not email or not password:
            error = 'Email and password are required.'
        else:
            user = user_service.authenticate(email, password)
            if user is not None:
                login_user(user)
                return redirect(next_url or url_for('pages.dashboard'))
            error = 'Invalid email or password.'

    status = 401 if error and request.method == 'POST' else 200
    return render_template('login.html', error=error, email=email, next=next_url), status


@pages_bp.route('/logout')
def logout():
    logout_user()
    return redirect(url_for('pages.login'))


@pages_bp.route('/admin')
@login_required
def dashboard():
    counts = {
        'Patients': Patient.query.count(),
        'Booked appointments': Appointment.query.filter_by(status=BOOKED).count(),
        'Services': Service.query.count(),
        'Doctors': Doctor.query.count(),
        'Blog posts': Blog.query.count(),
        'Users': User.query.count(),
    }
    recent = Appointment.query.order_by(Appointment.date.desc()).limit(10).all()
    return render_template('dashboard.html', counts=counts, recent=recent, user=current_user)
