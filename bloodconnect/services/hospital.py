"""Hospital staff REST calls."""


def get_hospital_profile(api):
    return api.get('/hospitals/profile/', default_error='Failed to load hospital profile')


def create_blood_request(api, request_data):
    return api.post('/hospitals/blood-requests/create/', json=request_data,
                    default_error='Failed to create blood request')


def get_hospital_requests(api):
    data = api.get('/hospitals/blood-requests/', default_error='Failed to load blood requests')
    return data.get('requests') or []


def get_available_donors(api, filters=None):
    # Empty filters are left off the query string
    params = {key: value for key, value in (filters or {}).items() if value}
    data = api.get('/donors/', params=params, default_error='Failed to load donors')
    if isinstance(data, list):
        return data
    return data.get('donors') or data.get('results') or []
