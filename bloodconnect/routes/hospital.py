from flask import Blueprint, render_template, redirect, url_for, flash, request, g, current_app
from flask_login import current_user
from bloodconnect.forms.hospital_forms import BloodRequestForm, DonorSearchForm
from bloodconnect.models.records import BloodRequest, request_status_counts
from bloodconnect.models.session import HOSPITAL_STAFF
from bloodconnect.services import hospital as hospital_service
from bloodconnect.utils.api import ApiError, SessionExpired, gather
from bloodconnect.utils.authorization import role_required
from bloodconnect.utils.helpers import fetch_or_default, apply_field_errors

hospital = Blueprint('hospital', __name__)


@hospital.route('/dashboard')
@role_required(HOSPITAL_STAFF)
def dashboard():
    api = g.api
    profile, raw_requests = fetch_or_default(
        lambda: gather(
            lambda: hospital_service.get_hospital_profile(api),
            lambda: hospital_service.get_hospital_requests(api),
        ),
        ({}, []),
        'Failed to load dashboard data',
    )
    requests = [BloodRequest.from_api(r) for r in raw_requests]

    return render_template('hospital/dashboard.html',
                           title='Hospital Dashboard',
                           hospital=profile,
                           recent_requests=requests[:5],
                           status_counts=request_status_counts(requests),
                           total_requests=len(requests))


@hospital.route('/requests/create', methods=['GET', 'POST'])
@role_required(HOSPITAL_STAFF)
def create_request():
    form = BloodRequestForm()

    if form.validate_on_submit():
        try:
            hospital_service.create_blood_request(g.api, form.to_payload())
            current_app.logger.info(
                f"{current_user.username} created a {form.urgency_level.data} request for "
                f"{form.units_required.data} unit(s) of {form.blood_group.data}")
            flash('Blood request submitted successfully! It will be reviewed by the blood bank.', 'success')
            # Redirect so the form comes back with its initial defaults
            return redirect(url_for('hospital.create_request'))
        except SessionExpired:
            raise
        except ApiError as e:
            apply_field_errors(form, e.field_errors)
            flash(e.message, 'danger')

    return render_template('hospital/create_request.html',
                           title='Create Blood Request',
                           form=form)


@hospital.route('/requests')
@role_required(HOSPITAL_STAFF)
def request_list():
    raw_requests = fetch_or_default(lambda: hospital_service.get_hospital_requests(g.api), [],
                                    'Failed to load blood requests')
    requests = [BloodRequest.from_api(r) for r in raw_requests]

    return render_template('hospital/requests.html',
                           title='Blood Requests',
                           requests=requests)


@hospital.route('/profile')
@role_required(HOSPITAL_STAFF)
def profile():
    hospital_profile = fetch_or_default(lambda: hospital_service.get_hospital_profile(g.api), {},
                                        'Failed to load hospital profile')

    return render_template('hospital/profile.html',
                           title='Hospital Profile',
                           hospital=hospital_profile)


@hospital.route('/donors')
@role_required(HOSPITAL_STAFF)
def find_donors():
    form = DonorSearchForm(request.args)
    donors = []
    searched = bool(request.args)
    if searched and form.validate():
        filters = {'blood_group': form.blood_group.data, 'city': form.city.data}
        donors = fetch_or_default(lambda: hospital_service.get_available_donors(g.api, filters), [],
                                  'Failed to load donors')

    return render_template('hospital/donors.html',
                           title='Find Donors',
                           form=form,
                           donors=donors,
                           searched=searched)
