"""Forms for the user blueprint."""

from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField
from wtforms.validators import DataRequired, Length, Optional


class UpdateProfileForm(FlaskForm):
    """Form for updating the display name and bio."""

    name = StringField("Display Name", validators=[DataRequired(), Length(max=50)])
    bio = TextAreaField("Bio", validators=[Optional(), Length(max=300)])
