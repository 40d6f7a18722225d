from flask import Blueprint, render_template, redirect, url_for
from flask_login import current_user

main = Blueprint('main', __name__)


def dashboard_endpoint(user):
    if user.is_donor():
        return 'donor.dashboard'
    elif user.is_hospital_staff():
        return 'hospital.dashboard'
    elif user.is_admin():
        return 'admin.dashboard'
    return None


@main.route('/')
def home():
    if current_user.is_authenticated:
        endpoint = dashboard_endpoint(current_user)
        if endpoint:
            return redirect(url_for(endpoint))

    return render_template('main/home.html', title='Home')
