from flask_wtf import FlaskForm
from wtforms import StringField, IntegerField, TextAreaField, SelectField, SelectMultipleField
from wtforms.validators import DataRequired, InputRequired, Optional, Email, Length, NumberRange
from ..models.candidate import SENIORITY_LEVELS


class CandidateForm(FlaskForm):
    class Meta:
        csrf = False

    name = StringField("Name", validators=[DataRequired(), Length(max=120)])
    email = StringField("Email", validators=[DataRequired(), Email(), Length(max=254)])
    phone = StringField("Phone", validators=[Optional(), Length(max=40)])
    seniority = SelectField("Seniority", choices=[(s, s) for s in SENIORITY_LEVELS], validators=[DataRequired()])
    skillIds = SelectMultipleField("Skills", coerce=int, validate_choice=False, validators=[DataRequired()])


class SkillCandidateForm(CandidateForm):
    """Input for the seniority + skills scoring variant."""
    profile_summary = TextAreaField("Profile summary", validators=[DataRequired()])


class RatingCandidateForm(CandidateForm):
    """Input for the three-ratings scoring variant."""
    profile_summary = TextAreaField("Profile summary", validators=[Optional()])
    performance = IntegerField("Performance", validators=[InputRequired(), NumberRange(min=0, max=100)])
    energy = IntegerField("Energy", validators=[InputRequired(), NumberRange(min=0, max=100)])
    culture = IntegerField("Culture", validators=[InputRequired(), NumberRange(min=0, max=100)])


FORMS = {"skills": SkillCandidateForm, "ratings": RatingCandidateForm}
