from flask_wtf import FlaskForm
from wtforms import StringField, IntegerField, FloatField, TextAreaField, SubmitField, SelectField
from wtforms.validators import DataRequired, Length, NumberRange, Optional
from bloodconnect.models.records import BLOOD_GROUPS, GENDERS, URGENCY_LEVELS


class BloodRequestForm(FlaskForm):
    patient_name = StringField('Patient Name', validators=[DataRequired(), Length(min=2, max=100)])
    patient_age = IntegerField('Patient Age', validators=[DataRequired(), NumberRange(min=1, max=120)])
    patient_gender = SelectField('Patient Gender', choices=[('', 'Select Gender')] + GENDERS, validators=[DataRequired()])
    blood_group = SelectField('Blood Group', choices=[('', 'Select Blood Group')] + [(bg, bg) for bg in BLOOD_GROUPS],
                              validators=[DataRequired()])
    units_required = IntegerField('Units Required', default=1, validators=[DataRequired(), NumberRange(min=1, max=10)])
    hemoglobin_level = FloatField('Hemoglobin Level (g/dL)', validators=[DataRequired(), NumberRange(min=0, max=25)])
    diagnosis = TextAreaField('Diagnosis', validators=[DataRequired(), Length(max=500)])
    operation_id = StringField('Operation ID', validators=[Optional(), Length(max=50)])
    urgency_level = SelectField('Urgency Level', default='medium',
                                choices=[(level, level.capitalize()) for level in URGENCY_LEVELS],
                                validators=[DataRequired()])
    submit = SubmitField('Submit Request')

    def to_payload(self):
        return {
            'patient_name': self.patient_name.data,
            'patient_age': self.patient_age.data,
            'patient_gender': self.patient_gender.data,
            'blood_group': self.blood_group.data,
            'units_required': self.units_required.data,
            'hemoglobin_level': self.hemoglobin_level.data,
            'diagnosis': self.diagnosis.data,
            'operation_id': self.operation_id.data or '',
            'urgency_level': self.urgency_level.data,
        }


class DonorSearchForm(FlaskForm):
    class Meta:
        csrf = False

    blood_group = SelectField('Blood Group', choices=[('', 'Any')] + [(bg, bg) for bg in BLOOD_GROUPS],
                              validators=[Optional()])
    city = StringField('City', validators=[Optional(), Length(max=100)])
