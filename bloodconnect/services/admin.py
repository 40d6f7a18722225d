"""Blood bank manager REST calls."""


def get_pending_requests(api):
    data = api.get('/requests/pending/', default_error='Failed to load pending requests')
    return data.get('requests') or []


def approve_request(api, request_id):
    return api.post(f'/requests/{request_id}/approve/', default_error='Failed to approve request')


def reject_request(api, request_id):
    return api.post(f'/requests/{request_id}/reject/', default_error='Failed to reject request')
