from flask import Blueprint, render_template, flash, g, current_app
from flask_login import current_user
from bloodconnect.forms.admin_forms import ActionForm
from bloodconnect.models.records import BloodRequest, remove_by_id, summarize_requests
from bloodconnect.models.session import BLOOD_BANK_MANAGER
from bloodconnect.services import admin as admin_service
from bloodconnect.utils.api import ApiError, SessionExpired
from bloodconnect.utils.authorization import role_required
from bloodconnect.utils.helpers import fetch_or_default

admin = Blueprint('admin', __name__)

PAST_TENSE = {'approve': 'approved', 'reject': 'rejected'}


def _load_pending():
    raw = fetch_or_default(lambda: admin_service.get_pending_requests(g.api), [],
                           'Failed to load pending requests')
    return [BloodRequest.from_api(r) for r in raw]


@admin.route('/dashboard')
@role_required(BLOOD_BANK_MANAGER)
def dashboard():
    pending = _load_pending()

    return render_template('admin/dashboard.html',
                           title='Admin Dashboard',
                           pending_count=len(pending),
                           recent_requests=pending[:5],
                           summary=summarize_requests(pending))


@admin.route('/requests/pending')
@role_required(BLOOD_BANK_MANAGER)
def pending_requests():
    return render_template('admin/pending_requests.html',
                           title='Pending Requests',
                           requests=_load_pending(),
                           form=ActionForm())


def _process(request_id, action):
    form = ActionForm()
    processed = False
    if form.validate_on_submit():
        call = admin_service.approve_request if action == 'approve' else admin_service.reject_request
        try:
            call(g.api, request_id)
            processed = True
            current_app.logger.info(f"{current_user.username} {PAST_TENSE[action]} blood request {request_id}")
            flash(f'Request #{request_id} has been {PAST_TENSE[action]}.', 'success' if action == 'approve' else 'info')
        except SessionExpired:
            raise
        except ApiError as e:
            flash(e.message, 'danger')
    else:
        flash('Invalid request. Please try again.', 'danger')

    pending = _load_pending()
    if processed:
        pending = remove_by_id(pending, request_id)

    return render_template('admin/pending_requests.html',
                           title='Pending Requests',
                           requests=pending,
                           form=ActionForm(formdata=None))


@admin.route('/requests/<int:request_id>/approve', methods=['POST'])
@role_required(BLOOD_BANK_MANAGER)
def approve_request(request_id):
    return _process(request_id, 'approve')


@admin.route('/requests/<int:request_id>/reject', methods=['POST'])
@role_required(BLOOD_BANK_MANAGER)
def reject_request(request_id):
    return _process(request_id, 'reject')


@admin.route('/analytics')
@role_required(BLOOD_BANK_MANAGER)
def analytics():
    pending = _load_pending()

    return render_template('admin/analytics.html',
                           title='Platform Analytics',
                           summary=summarize_requests(pending))
