"""Donor-facing REST calls."""

ACCEPT = 'accept'
DECLINE = 'decline'
RESPONSES = (ACCEPT, DECLINE)


def get_donor_profile(api):
    return api.get('/donors/donor/profile/', default_error='Failed to load profile')


def update_donor_profile(api, profile_data):
    return api.put('/donors/donor/profile/', json=profile_data, default_error='Error updating profile')


def get_donation_history(api):
    data = api.get('/donors/donor/donation-history/', default_error='Failed to load donation history')
    return data.get('donations') or []


def get_donor_notifications(api):
    data = api.get('/requests/notifications/donor/', default_error='Failed to load notifications')
    return data.get('notifications') or []


def respond_to_notification(api, notification_id, response):
    if response not in RESPONSES:
        raise ValueError(f"Unknown notification response: {response}")
    return api.post(f'/requests/notifications/{notification_id}/respond/',
                    json={'response': response},
                    default_error='Failed to respond to notification')
