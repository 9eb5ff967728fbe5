from flask import request, jsonify, current_app
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.datastructures import MultiDict
from . import bp
from .forms import FORMS
from ..extensions import db
from ..models.candidate import Candidate
from ..models.skill import Skill
from ..services.scoring import CLASSIFICATIONS, calculate_fit_score, calculate_rating_score


def _formdata(payload):
    """Turn a JSON body into form data WTForms can validate.

    Nulls are dropped so they read as missing, and scalars are stringified so
    a rating of 0 still counts as provided input.
    """
    if not isinstance(payload, dict):
        return MultiDict()
    items = []
    for key, value in payload.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            items.extend((key, str(v)) for v in value if v is not None)
        else:
            items.append((key, str(value)))
    return MultiDict(items)


def _score(variant, form, skills):
    if variant == "ratings":
        return calculate_rating_score(form.performance.data, form.energy.data, form.culture.data)
    return calculate_fit_score(form.seniority.data, [s.name for s in skills])


@bp.after_request
def add_cors_headers(response):
    response.headers["Access-Control-Allow-Origin"] = current_app.config.get("CORS_ORIGINS", "*")
    response.headers["Access-Control-Allow-Methods"] = "GET, POST"
    response.headers["Access-Control-Allow-Headers"] = "Content-Type"
    return response


@bp.get("/health")
def health():
    return jsonify({"status": "API is running"}), 200


@bp.get("/skills")
def list_skills():
    try:
        skills = Skill.query.order_by(Skill.id).all()
    except SQLAlchemyError as e:
        current_app.logger.exception("Error fetching skills")
        return jsonify({"message": "Error fetching skills", "error": str(e)}), 500
    return jsonify([s.to_dict() for s in skills]), 200


@bp.get("/candidates")
def list_candidates():
    q = request.args.get("q")
    classification = request.args.get("classification")

    query = Candidate.query
    if q:
        like = f"%{q}%"
        query = query.filter(or_(Candidate.name.ilike(like), Candidate.email.ilike(like)))
    if classification and classification != "all":
        variant = current_app.config.get("FIT_SCORE_VARIANT", "skills")
        if classification not in CLASSIFICATIONS.get(variant, []):
            return jsonify({"message": f"Unknown classification {classification!r}.",
                            "errors": {"classification": [f"Expected one of: all, {', '.join(CLASSIFICATIONS.get(variant, []))}"]}}), 400
        query = query.filter(Candidate.fit_score_classification == classification)
    try:
        items = query.order_by(Candidate.created_at.desc(), Candidate.id.desc()).all()
    except SQLAlchemyError as e:
        current_app.logger.exception("Error fetching candidates")
        return jsonify({"message": "Error fetching candidates", "error": str(e)}), 500
    return jsonify([c.to_dict() for c in items]), 200


@bp.get("/metrics")
def metrics():
    try:
        total, average = db.session.query(func.count(Candidate.id), func.avg(Candidate.fit_score)).one()
    except SQLAlchemyError as e:
        current_app.logger.exception("Error fetching metrics")
        return jsonify({"message": "Error fetching metrics", "error": str(e)}), 500
    return jsonify({
        "totalCandidates": int(total or 0),
        "averageFitScore": float(average) if total else 0.0,
    }), 200


@bp.post("/candidates")
def create_candidate():
    variant = current_app.config.get("FIT_SCORE_VARIANT", "skills")
    form_class = FORMS.get(variant)
    if form_class is None:
        current_app.logger.error("Unknown FIT_SCORE_VARIANT %r", variant)
        return jsonify({"message": "Error creating candidate", "error": f"unknown scoring variant {variant!r}"}), 500

    form = form_class(formdata=_formdata(request.get_json(silent=True)))
    if not form.validate():
        return jsonify({"message": "All required fields must be provided.", "errors": form.errors}), 400

    skill_ids = sorted(set(form.skillIds.data or []))
    try:
        skills = Skill.query.filter(Skill.id.in_(skill_ids)).all() if skill_ids else []
        unknown = set(skill_ids) - {s.id for s in skills}
        if unknown:
            return jsonify({
                "message": "Unknown skills.",
                "errors": {"skillIds": [f"Unknown skill id(s): {', '.join(str(i) for i in sorted(unknown))}"]},
            }), 400

        result = _score(variant, form, skills)
        c = Candidate(
            name=form.name.data.strip(),
            email=form.email.data.strip(),
            phone=form.phone.data or None,
            seniority=form.seniority.data,
            profile_summary=form.profile_summary.data or None,
            fit_score=result.score,
            fit_score_classification=result.classification,
            skills=skills,
        )
        if variant == "ratings":
            c.performance = form.performance.data
            c.energy = form.energy.data
            c.culture = form.culture.data
        # candidate row and its skill links are committed together
        db.session.add(c)
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        if Candidate.query.filter_by(email=form.email.data.strip()).first() is not None:
            return jsonify({"message": "Email already exists.", "error": str(e.orig)}), 409
        current_app.logger.exception("Error creating candidate")
        return jsonify({"message": "Error creating candidate", "error": str(e.orig)}), 500
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.exception("Error creating candidate")
        return jsonify({"message": "Error creating candidate", "error": str(e)}), 500

    current_app.logger.info("Created candidate id=%s score=%s (%s)", c.id, c.fit_score, c.fit_score_classification)
    return jsonify({"message": "Candidate created successfully!", "data": c.to_dict()}), 201
