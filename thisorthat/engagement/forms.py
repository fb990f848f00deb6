"""Forms for the engagement blueprint."""

from flask_wtf import FlaskForm
from wtforms import SelectField, TextAreaField
from wtforms.validators import DataRequired, Length

from thisorthat.core.constants import COMMENT_MAX_LENGTH, REACTION_TYPES


class CommentForm(FlaskForm):
    """Form for commenting on a survey."""

    text = TextAreaField(
        "Comment", validators=[DataRequired(), Length(max=COMMENT_MAX_LENGTH)]
    )


class ReactionForm(FlaskForm):
    """Form for reacting to a survey."""

    reaction = SelectField(
        "Reaction",
        choices=[(r, r) for r in REACTION_TYPES],
        validators=[DataRequired()],
    )
