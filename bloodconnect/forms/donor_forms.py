from flask_wtf import FlaskForm
from wtforms import StringField, SubmitField, BooleanField, TextAreaField, HiddenField
from wtforms.validators import DataRequired, Length, Optional, AnyOf
from bloodconnect.services.donor import RESPONSES


class DonorProfileForm(FlaskForm):
    full_name = StringField('Full Name', validators=[DataRequired(), Length(min=2, max=100)])
    phone_number = StringField('Phone Number', validators=[DataRequired(), Length(min=10, max=15)])
    emergency_contact = StringField('Emergency Contact', validators=[Optional(), Length(max=15)])
    is_available = BooleanField('Available to donate')
    address = TextAreaField('Address', validators=[Optional(), Length(max=200)])
    city = StringField('City', validators=[Optional(), Length(max=100)])
    state = StringField('State', validators=[Optional(), Length(max=100)])
    country = StringField('Country', validators=[Optional(), Length(max=100)])
    pincode = StringField('Pincode', validators=[Optional(), Length(max=10)])
    submit = SubmitField('Save Changes')

    EDITABLE_FIELDS = ('full_name', 'phone_number', 'emergency_contact', 'is_available',
                       'address', 'city', 'state', 'country', 'pincode')

    def populate(self, profile):
        for name in self.EDITABLE_FIELDS:
            getattr(self, name).data = profile.get(name)

    def to_payload(self):
        return {name: getattr(self, name).data for name in self.EDITABLE_FIELDS}


class RespondForm(FlaskForm):
    response = HiddenField('Response', validators=[DataRequired(), AnyOf(RESPONSES)])
