"""Forms for the survey blueprint."""

from flask_wtf import FlaskForm
from wtforms import (
    BooleanField,
    FieldList,
    Form,
    FormField,
    IntegerField,
    SelectField,
    StringField,
)
from wtforms.validators import DataRequired, Length, NumberRange, Optional

from thisorthat.core.constants import (
    INVITE_CODE_LENGTH,
    MIN_TOURNAMENT_ITEMS,
    SURVEY_CATEGORIES,
    VISIBILITY_PRIVATE,
    VISIBILITY_PUBLIC,
)

VISIBILITY_CHOICES = [(VISIBILITY_PUBLIC, "Public"), (VISIBILITY_PRIVATE, "Private")]
CATEGORY_CHOICES = [("", "No category")] + [(c, c.title()) for c in SURVEY_CATEGORIES]


class QuestionForm(Form):
    """One this-or-that pair. Subform, so no CSRF token of its own."""

    option_a = StringField("Option A", validators=[DataRequired(), Length(max=200)])
    option_a_image = StringField("Option A Image URL", validators=[Optional()])
    option_b = StringField("Option B", validators=[DataRequired(), Length(max=200)])
    option_b_image = StringField("Option B Image URL", validators=[Optional()])


class ItemForm(Form):
    """One tournament contender."""

    name = StringField("Name", validators=[DataRequired(), Length(max=200)])
    image = StringField("Image URL", validators=[Optional()])


class _SurveySettingsForm(FlaskForm):
    title = StringField("Title", validators=[DataRequired(), Length(max=200)])

    visibility = SelectField(
        "Visibility", choices=VISIBILITY_CHOICES, default=VISIBILITY_PUBLIC
    )

    max_votes = IntegerField(
        "Max Votes", validators=[Optional(), NumberRange(min=1)]
    )

    category = SelectField("Category", choices=CATEGORY_CHOICES, default="")

    # Comma separated
    tags = StringField("Tags", validators=[Optional()])

    def tag_list(self) -> list[str]:
        return [t.strip() for t in (self.tags.data or "").split(",") if t.strip()]


class SurveyForm(_SurveySettingsForm):
    """Form for creating a standard survey."""

    questions = FieldList(FormField(QuestionForm), min_entries=1)


class TournamentForm(_SurveySettingsForm):
    """Form for creating a tournament."""

    round_votes_required = IntegerField(
        "Votes per Round", validators=[Optional(), NumberRange(min=1)]
    )

    items = FieldList(FormField(ItemForm), min_entries=MIN_TOURNAMENT_ITEMS)


class InviteCodeForm(FlaskForm):
    """Form for unlocking a private survey."""

    code = StringField(
        "Invite Code",
        validators=[
            DataRequired(),
            Length(min=INVITE_CODE_LENGTH, max=INVITE_CODE_LENGTH),
        ],
    )


class PrivacyForm(FlaskForm):
    """Form for publishing individual votes."""

    show_individual_votes = BooleanField("Show individual votes")
