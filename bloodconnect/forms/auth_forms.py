from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, SubmitField, BooleanField, SelectField, FloatField, TextAreaField, DateField
from wtforms.validators import DataRequired, Length, Email, EqualTo, NumberRange, Optional
from bloodconnect.models.records import BLOOD_GROUPS, GENDERS


class RegistrationForm(FlaskForm):
    role = SelectField('Register as', choices=[('donor', 'Donor'), ('hospital', 'Hospital')], validators=[DataRequired()])
    submit = SubmitField('Continue')


class LoginForm(FlaskForm):
    username = StringField('Username', validators=[DataRequired()])
    password = PasswordField('Password', validators=[DataRequired()])
    submit = SubmitField('Login')


class DonorRegistrationForm(FlaskForm):
    # Account
    username = StringField('Username', validators=[DataRequired(), Length(min=3, max=150)])
    email = StringField('Email', validators=[DataRequired(), Email()])
    phone_number = StringField('Phone Number', validators=[DataRequired(), Length(min=10, max=15)])
    password = PasswordField('Password', validators=[DataRequired()])
    password2 = PasswordField('Confirm Password', validators=[DataRequired(), EqualTo('password')])

    # Personal and medical details
    full_name = StringField('Full Name', validators=[DataRequired(), Length(min=2, max=100)])
    date_of_birth = DateField('Date of Birth', validators=[DataRequired()])
    gender = SelectField('Gender', choices=GENDERS, validators=[DataRequired()])
    blood_group = SelectField('Blood Group', choices=[(bg, bg) for bg in BLOOD_GROUPS], validators=[DataRequired()])
    weight = FloatField('Weight (kg)', validators=[DataRequired(), NumberRange(min=45)])
    height = FloatField('Height (cm)', validators=[Optional(), NumberRange(min=50, max=250)])
    emergency_contact = StringField('Emergency Contact', validators=[Optional(), Length(max=15)])
    address = TextAreaField('Address', validators=[DataRequired(), Length(min=5, max=200)])
    city = StringField('City', validators=[DataRequired(), Length(max=100)])
    state = StringField('State', validators=[DataRequired(), Length(max=100)])
    country = StringField('Country', validators=[DataRequired(), Length(max=100)])
    pincode = StringField('Pincode', validators=[DataRequired(), Length(min=4, max=10)])
    has_chronic_disease = BooleanField('I have a chronic disease')
    chronic_disease_details = TextAreaField('Chronic Disease Details', validators=[Optional(), Length(max=500)])
    recent_medications = TextAreaField('Recent Medications', validators=[Optional(), Length(max=500)])
    recent_surgeries = TextAreaField('Recent Surgeries', validators=[Optional(), Length(max=500)])
    allergies = TextAreaField('Allergies', validators=[Optional(), Length(max=500)])
    submit = SubmitField('Register')

    def to_payload(self):
        payload = {name: field.data for name, field in self._fields.items()
                   if name not in ('submit', 'csrf_token')}
        payload['date_of_birth'] = self.date_of_birth.data.isoformat() if self.date_of_birth.data else None
        return payload


class HospitalRegistrationForm(FlaskForm):
    # Hospital
    name = StringField('Hospital Name', validators=[DataRequired(), Length(min=2, max=100)])
    username = StringField('Hospital Username', validators=[DataRequired(), Length(min=3, max=150)])
    email = StringField('Hospital Email', validators=[DataRequired(), Email()])
    phone_number = StringField('Hospital Phone', validators=[DataRequired(), Length(min=10, max=15)])
    license_number = StringField('License Number', validators=[DataRequired(), Length(min=5, max=50)])
    address = TextAreaField('Address', validators=[DataRequired(), Length(min=5, max=200)])
    city = StringField('City', validators=[DataRequired(), Length(max=100)])
    state = StringField('State', validators=[DataRequired(), Length(max=100)])
    country = StringField('Country', validators=[DataRequired(), Length(max=100)])

    # Staff account
    staff_username = StringField('Staff Username', validators=[DataRequired(), Length(min=3, max=150)])
    staff_email = StringField('Staff Email', validators=[DataRequired(), Email()])
    staff_phone_number = StringField('Staff Phone', validators=[DataRequired(), Length(min=10, max=15)])
    password = PasswordField('Password', validators=[DataRequired()])
    password2 = PasswordField('Confirm Password', validators=[DataRequired(), EqualTo('password')])
    submit = SubmitField('Register Hospital')

    HOSPITAL_FIELDS = ('name', 'username', 'email', 'phone_number', 'license_number',
                       'address', 'city', 'state', 'country')

    # Backend field name -> form field
    ERROR_FIELDS = {
        'user.username': 'staff_username',
        'user.email': 'staff_email',
        'user.phone_number': 'staff_phone_number',
        'user.password': 'password',
        'user.password2': 'password2',
    }

    def to_payload(self):
        payload = {name: getattr(self, name).data for name in self.HOSPITAL_FIELDS}
        payload['user'] = {
            'username': self.staff_username.data,
            'email': self.staff_email.data,
            'phone_number': self.staff_phone_number.data,
            'password': self.password.data,
            'password2': self.password2.data,
            'user_type': 'hospital_staff',
        }
        return payload
