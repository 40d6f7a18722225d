from collections import Counter
from datetime import datetime

BLOOD_GROUPS = ['A+', 'A-', 'B+', 'B-', 'AB+', 'AB-', 'O+', 'O-']
GENDERS = [('M', 'Male'), ('F', 'Female'), ('O', 'Other')]
URGENCY_LEVELS = ['low', 'medium', 'high', 'critical']
REQUEST_STATUSES = ['pending', 'approved', 'rejected', 'completed']

# Badge classes used by the templates
URGENCY_BADGES = {
    'critical': 'danger',
    'high': 'warning',
    'medium': 'info',
    'low': 'success',
}
STATUS_BADGES = {
    'approved': 'success',
    'rejected': 'danger',
    'completed': 'primary',
    'pending': 'warning',
}

LIVES_PER_UNIT = 3


def parse_timestamp(value):
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace('Z', '+00:00'))
    except ValueError:
        return None


class BloodRequest:
    def __init__(self, id, patient_name, blood_group, units_required, urgency_level='medium',
                 status='pending', patient_age=None, patient_gender=None, hemoglobin_level=None,
                 diagnosis='', operation_id='', created_at=None, hospital_name='', hospital_city=''):
        self.id = id
        self.patient_name = patient_name
        self.patient_age = patient_age
        self.patient_gender = patient_gender
        self.blood_group = blood_group
        self.units_required = units_required
        self.hemoglobin_level = hemoglobin_level
        self.diagnosis = diagnosis
        self.operation_id = operation_id
        self.urgency_level = urgency_level
        self.status = status
        self.created_at = parse_timestamp(created_at)
        self.hospital_name = hospital_name
        self.hospital_city = hospital_city

    @classmethod
    def from_api(cls, data):
        return cls(
            id=data.get('id'),
            patient_name=data.get('patient_name', ''),
            patient_age=data.get('patient_age'),
            patient_gender=data.get('patient_gender'),
            blood_group=data.get('blood_group', ''),
            units_required=int(data.get('units_required') or 0),
            hemoglobin_level=data.get('hemoglobin_level'),
            diagnosis=data.get('diagnosis') or '',
            operation_id=data.get('operation_id') or '',
            urgency_level=data.get('urgency_level') or 'medium',
            status=data.get('status') or 'pending',
            created_at=data.get('created_at'),
            hospital_name=data.get('hospital_name') or '',
            hospital_city=data.get('hospital_city') or '',
        )

    @property
    def urgency_badge(self):
        return URGENCY_BADGES.get(self.urgency_level, 'secondary')

    @property
    def status_badge(self):
        return STATUS_BADGES.get(self.status, 'secondary')

    def is_pending(self):
        return self.status == 'pending'

    def __repr__(self):
        return f"BloodRequest('{self.patient_name}', '{self.blood_group}', '{self.status}')"


class Notification:
    def __init__(self, id, request_details=None, status='pending'):
        self.id = id
        self.request_details = dict(request_details or {})
        self.status = status

    @classmethod
    def from_api(cls, data):
        return cls(
            id=data.get('id'),
            request_details=data.get('request_details'),
            status=data.get('status') or 'pending',
        )

    @property
    def urgency_level(self):
        return self.request_details.get('urgency_level') or ''

    @property
    def urgency_badge(self):
        return URGENCY_BADGES.get(self.urgency_level, 'secondary')

    def __repr__(self):
        return f"Notification('{self.id}', '{self.status}')"


class Donation:
    def __init__(self, id, patient_name='', hospital_name='', units_donated=1, donation_date=None,
                 status='', notes=''):
        self.id = id
        self.patient_name = patient_name
        self.hospital_name = hospital_name
        self.units_donated = units_donated
        self.donation_date = parse_timestamp(donation_date)
        self.status = status
        self.notes = notes

    @classmethod
    def from_api(cls, data):
        units = data.get('units_donated')
        return cls(
            id=data.get('id'),
            patient_name=data.get('patient_name') or '',
            hospital_name=data.get('hospital_name') or '',
            units_donated=1 if units is None else int(units),
            donation_date=data.get('donation_date') or data.get('created_at'),
            status=data.get('status') or '',
            notes=data.get('notes') or '',
        )

    def __repr__(self):
        return f"Donation('{self.patient_name}', '{self.units_donated}')"


def remove_by_id(items, item_id):
    """Return ``items`` without the entry whose id is ``item_id``; order is kept."""
    return [item for item in items if str(item.id) != str(item_id)]


def donation_stats(donations):
    total_units = sum(d.units_donated for d in donations)
    return {
        'total_donations': len(donations),
        'total_units': total_units,
        'lives_impacted': total_units * LIVES_PER_UNIT,
    }


def request_status_counts(requests):
    counts = Counter(r.status for r in requests)
    return {status: counts.get(status, 0) for status in REQUEST_STATUSES}


def summarize_requests(requests):
    """Analytics over a list of blood requests."""
    by_urgency = Counter(r.urgency_level for r in requests)
    by_group = Counter(r.blood_group for r in requests)
    return {
        'total_requests': len(requests),
        'units_requested': sum(r.units_required for r in requests),
        'by_urgency': [(level, by_urgency.get(level, 0)) for level in reversed(URGENCY_LEVELS)],
        'by_blood_group': [(group, by_group.get(group, 0)) for group in BLOOD_GROUPS],
        'critical_count': by_urgency.get('critical', 0),
    }
