from flask import Blueprint, render_template, redirect, url_for, flash, request, g, current_app
from flask_login import current_user
from bloodconnect.forms.donor_forms import DonorProfileForm, RespondForm
from bloodconnect.models.records import Donation, Notification, donation_stats, remove_by_id
from bloodconnect.models.session import DONOR
from bloodconnect.services import donor as donor_service
from bloodconnect.utils.api import ApiError, SessionExpired, gather
from bloodconnect.utils.authorization import role_required
from bloodconnect.utils.helpers import fetch_or_default

donor = Blueprint('donor', __name__)


def _load_notifications():
    raw = fetch_or_default(lambda: donor_service.get_donor_notifications(g.api), [],
                           'Failed to load notifications')
    return [Notification.from_api(n) for n in raw]


@donor.route('/dashboard')
@role_required(DONOR)
def dashboard():
    # Profile and history are fetched together and joined once both finish
    api = g.api
    profile, history = fetch_or_default(
        lambda: gather(
            lambda: donor_service.get_donor_profile(api),
            lambda: donor_service.get_donation_history(api),
        ),
        ({}, []),
        'Failed to load dashboard data',
    )
    donations = [Donation.from_api(d) for d in history]
    notifications = _load_notifications()

    return render_template('donor/dashboard.html',
                           title='Donor Dashboard',
                           profile=profile,
                           blood_group=profile.get('blood_group') or current_user.profile.get('blood_group'),
                           donations=donations[:5],
                           notification_count=len(notifications),
                           stats=donation_stats(donations))


@donor.route('/notifications')
@role_required(DONOR)
def notifications():
    return render_template('donor/notifications.html',
                           title='Blood Requests',
                           notifications=_load_notifications(),
                           form=RespondForm())


@donor.route('/notifications/<int:notification_id>/respond', methods=['POST'])
@role_required(DONOR)
def respond(notification_id):
    form = RespondForm()
    responded = False
    if form.validate_on_submit():
        try:
            donor_service.respond_to_notification(g.api, notification_id, form.response.data)
            responded = True
            current_app.logger.info(
                f"Donor {current_user.username} responded '{form.response.data}' to notification {notification_id}")
            if form.response.data == donor_service.ACCEPT:
                flash('Thank you! The hospital has been told you accepted the request.', 'success')
            else:
                flash('You declined the request.', 'info')
        except SessionExpired:
            raise
        except ApiError as e:
            flash(e.message, 'danger')
    else:
        flash('Invalid response.', 'danger')

    remaining = _load_notifications()
    if responded:
        remaining = remove_by_id(remaining, notification_id)

    return render_template('donor/notifications.html',
                           title='Blood Requests',
                           notifications=remaining,
                           form=RespondForm(formdata=None))


@donor.route('/profile', methods=['GET', 'POST'])
@role_required(DONOR)
def profile():
    form = DonorProfileForm()

    if form.validate_on_submit():
        try:
            donor_service.update_donor_profile(g.api, form.to_payload())
            flash('Profile updated successfully!', 'success')
            return redirect(url_for('donor.profile'))
        except SessionExpired:
            raise
        except ApiError as e:
            current_app.logger.warning(f"Profile update for {current_user.username} failed: {e.message}")
            flash('Error updating profile', 'danger')
        profile_data = {}
    else:
        profile_data = fetch_or_default(lambda: donor_service.get_donor_profile(g.api), {},
                                        'Failed to load profile')
        if request.method == 'GET':
            form.populate(profile_data)

    return render_template('donor/profile.html',
                           title='Profile',
                           form=form,
                           profile=profile_data)


@donor.route('/history')
@role_required(DONOR)
def donation_history():
    history = fetch_or_default(lambda: donor_service.get_donation_history(g.api), [],
                               'Failed to load donation history')
    donations = [Donation.from_api(d) for d in history]

    return render_template('donor/donation_history.html',
                           title='Donation History',
                           donations=donations,
                           stats=donation_stats(donations))
