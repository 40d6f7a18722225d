from urllib.parse import urlparse

from flask import Blueprint, render_template, redirect, url_for, flash, request, g, current_app
from flask_login import current_user
from bloodconnect.forms.auth_forms import (
    RegistrationForm, LoginForm, DonorRegistrationForm, HospitalRegistrationForm
)
from bloodconnect.routes.main import dashboard_endpoint
from bloodconnect.services.auth import AuthGateway
from bloodconnect.utils.helpers import apply_field_errors

auth = Blueprint('auth', __name__)


def _is_local(target):
    parsed = urlparse(target)
    return not parsed.scheme and not parsed.netloc and target.startswith('/')


def _flash_unclaimed(errors):
    for name, messages in errors.items():
        flash(f"{name}: {' '.join(messages)}", 'danger')


@auth.route('/register', methods=['GET', 'POST'])
def register():
    if current_user.is_authenticated:
        return redirect(url_for('main.home'))

    form = RegistrationForm()
    if form.validate_on_submit():
        if form.role.data == 'donor':
            return redirect(url_for('auth.register_donor'))
        elif form.role.data == 'hospital':
            return redirect(url_for('auth.register_hospital'))

    return render_template('auth/register.html', title='Register', form=form)


@auth.route('/register/donor', methods=['GET', 'POST'])
def register_donor():
    if current_user.is_authenticated:
        return redirect(url_for('main.home'))

    form = DonorRegistrationForm()
    if form.validate_on_submit():
        result = AuthGateway(g.api).register_donor(form.to_payload())
        if result.success:
            current_app.logger.info(f"Registered donor {form.username.data}")
            flash('Registration successful! Please login to continue.', 'success')
            return redirect(url_for('auth.login'))

        flash(result.error or 'Registration failed', 'danger')
        _flash_unclaimed(apply_field_errors(form, result.field_errors))

    return render_template('auth/register_donor.html', title='Donor Registration', form=form)


@auth.route('/register/hospital', methods=['GET', 'POST'])
def register_hospital():
    if current_user.is_authenticated:
        return redirect(url_for('main.home'))

    form = HospitalRegistrationForm()
    if form.validate_on_submit():
        result = AuthGateway(g.api).register_hospital(form.to_payload())
        if result.success:
            current_app.logger.info(f"Registered hospital {form.name.data}")
            message = (result.data or {}).get('message') or 'Hospital registered successfully'
            flash(message, 'success')
            flash('Hospital registration submitted for verification! You can now login with your staff account.', 'info')
            return redirect(url_for('auth.login'))

        flash(result.error or 'Registration failed', 'danger')
        _flash_unclaimed(apply_field_errors(form, result.field_errors, HospitalRegistrationForm.ERROR_FIELDS))

    return render_template('auth/register_hospital.html', title='Hospital Registration', form=form)


@auth.route('/login', methods=['GET', 'POST'])
def login():
    if current_user.is_authenticated:
        return redirect(url_for('main.home'))

    form = LoginForm()
    if form.validate_on_submit():
        result = g.session_store.login({
            'username': form.username.data,
            'password': form.password.data,
        })
        if result.success:
            next_page = request.args.get('next')
            if next_page and _is_local(next_page):
                return redirect(next_page)
            endpoint = dashboard_endpoint(result.data)
            return redirect(url_for(endpoint or 'main.home'))
        else:
            flash(result.error or 'Login failed', 'danger')

    return render_template('auth/login.html', title='Login', form=form)


@auth.route('/logout')
def logout():
    g.session_store.logout()
    return redirect(url_for('main.home'))
