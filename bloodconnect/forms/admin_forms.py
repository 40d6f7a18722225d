from flask_wtf import FlaskForm
from wtforms import SubmitField


class ActionForm(FlaskForm):
    """CSRF-protected form behind approve/reject buttons."""
    submit = SubmitField('Submit')
